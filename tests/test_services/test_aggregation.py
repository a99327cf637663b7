import pytest

from textextract.services.aggregation_service import AnalyticsAggregator
from textextract.services.extraction_service import ExtractionService


async def _create(db_session, user_id: str, text: str, confidence: float):
    service = ExtractionService(db_session)
    extraction = await service.create_extraction(
        user_id=user_id,
        file_name="doc.txt",
        file_type="text/plain",
        file_size_bytes=len(text),
        extracted_text=text,
        confidence_score=confidence,
        processing_time_ms=12,
    )
    await service.aggregator.on_extraction_created(user_id, len(text), confidence)
    await db_session.commit()
    return extraction


class TestAnalyticsAggregator:
    @pytest.mark.asyncio
    async def test_first_extraction_creates_aggregate(self, db_session):
        aggregator = AnalyticsAggregator(db_session)
        await aggregator.on_extraction_created("user-1", 120, 0.9)
        await db_session.commit()

        analytics = await aggregator.get("user-1")
        assert analytics.total_extractions == 1
        assert analytics.total_files_processed == 1
        assert analytics.total_text_extracted == 120
        assert analytics.average_confidence == pytest.approx(0.9)

    @pytest.mark.asyncio
    async def test_running_mean_over_three_extractions(self, db_session):
        aggregator = AnalyticsAggregator(db_session)
        for confidence in (0.9, 0.8, 0.7):
            await aggregator.on_extraction_created("user-1", 10, confidence)
        await db_session.commit()

        analytics = await aggregator.get("user-1")
        assert analytics.total_extractions == 3
        assert analytics.total_text_extracted == 30
        assert analytics.average_confidence == pytest.approx(0.8)

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, db_session):
        aggregator = AnalyticsAggregator(db_session)
        await aggregator.on_extraction_created("user-1", 10, 0.9)
        await aggregator.on_extraction_created("user-2", 50, 0.5)
        await db_session.commit()

        assert (await aggregator.get("user-1")).average_confidence == pytest.approx(0.9)
        assert (await aggregator.get("user-2")).total_text_extracted == 50

    @pytest.mark.asyncio
    async def test_create_then_delete_returns_to_zero(self, db_session):
        extraction = await _create(db_session, "user-1", "Some extracted text", 0.85)

        await ExtractionService(db_session).delete_extraction(extraction.id, "user-1")
        await db_session.commit()

        analytics = await AnalyticsAggregator(db_session).get("user-1")
        assert analytics.total_extractions == 0
        assert analytics.total_files_processed == 0
        assert analytics.total_text_extracted == 0
        assert analytics.average_confidence == 0.0

    @pytest.mark.asyncio
    async def test_delete_recomputes_exact_mean(self, db_session):
        await _create(db_session, "user-1", "first", 0.9)
        second = await _create(db_session, "user-1", "second", 0.6)
        await _create(db_session, "user-1", "third", 0.7)

        await ExtractionService(db_session).delete_extraction(second.id, "user-1")
        await db_session.commit()

        analytics = await AnalyticsAggregator(db_session).get("user-1")
        assert analytics.total_extractions == 2
        assert analytics.total_text_extracted == len("first") + len("third")
        assert analytics.average_confidence == pytest.approx(0.8)

    @pytest.mark.asyncio
    async def test_counters_never_go_negative(self, db_session):
        aggregator = AnalyticsAggregator(db_session)
        await aggregator.on_extraction_created("user-1", 5, 0.5)
        await aggregator.on_extraction_deleted("user-1", 500)
        await aggregator.on_extraction_deleted("user-1", 500)
        await db_session.commit()

        analytics = await aggregator.get("user-1")
        assert analytics.total_extractions == 0
        assert analytics.total_text_extracted == 0

    @pytest.mark.asyncio
    async def test_text_edit_adjusts_total(self, db_session):
        extraction = await _create(db_session, "user-1", "0123456789", 0.9)

        await ExtractionService(db_session).update_text(extraction.id, "user-1", "01234")
        await db_session.commit()

        analytics = await AnalyticsAggregator(db_session).get("user-1")
        assert analytics.total_text_extracted == 5
        assert analytics.total_extractions == 1
