import uuid
from typing import Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.exceptions import ExtractionNotFoundError
from textextract.core.logging import get_logger
from textextract.models.extraction import Extraction
from textextract.services.aggregation_service import AnalyticsAggregator

logger = get_logger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ExtractionService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.aggregator = AnalyticsAggregator(db)

    async def create_extraction(
        self,
        user_id: str,
        file_name: str,
        file_type: str,
        file_size_bytes: int,
        extracted_text: str,
        confidence_score: float,
        processing_time_ms: int,
    ) -> Extraction:
        extraction = Extraction(
            user_id=user_id,
            file_name=file_name,
            file_type=file_type,
            file_size_bytes=file_size_bytes,
            extracted_text=extracted_text,
            confidence_score=min(max(confidence_score, 0.0), 1.0),
            processing_time_ms=max(processing_time_ms, 0),
        )
        self.db.add(extraction)
        await self.db.flush()
        return extraction

    async def get_extraction(self, extraction_id: uuid.UUID, user_id: str) -> Extraction:
        result = await self.db.execute(
            select(Extraction).where(
                Extraction.id == extraction_id,
                Extraction.user_id == user_id,
            )
        )
        extraction = result.scalar_one_or_none()
        if extraction is None:
            raise ExtractionNotFoundError(str(extraction_id))
        return extraction

    async def list_extractions(
        self,
        user_id: str,
        limit: int = 10,
        offset: int = 0,
        search: Optional[str] = None,
        file_type: Optional[str] = None,
    ) -> tuple[list[Extraction], int]:
        filters = [Extraction.user_id == user_id]
        if search:
            pattern = f"%{_escape_like(search.lower())}%"
            filters.append(
                or_(
                    func.lower(Extraction.file_name).like(pattern, escape="\\"),
                    func.lower(Extraction.extracted_text).like(pattern, escape="\\"),
                )
            )
        if file_type:
            filters.append(Extraction.file_type.like(f"{_escape_like(file_type)}%", escape="\\"))

        query = (
            select(Extraction)
            .where(*filters)
            .order_by(Extraction.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(query)
        extractions = list(result.scalars().all())

        count_result = await self.db.execute(select(func.count(Extraction.id)).where(*filters))
        total = count_result.scalar() or 0

        return extractions, total

    async def update_text(self, extraction_id: uuid.UUID, user_id: str, extracted_text: str) -> Extraction:
        extraction = await self.get_extraction(extraction_id, user_id)
        delta = len(extracted_text) - len(extraction.extracted_text)
        extraction.extracted_text = extracted_text
        await self.db.flush()
        await self.aggregator.on_extraction_text_changed(user_id, delta)
        await self.db.refresh(extraction)
        return extraction

    async def delete_extraction(self, extraction_id: uuid.UUID, user_id: str) -> None:
        """Delete one record and recompute the owner's aggregate in the caller's transaction."""
        extraction = await self.get_extraction(extraction_id, user_id)
        text_length = len(extraction.extracted_text)

        await self.db.execute(
            delete(Extraction).where(Extraction.id == extraction.id).execution_options(synchronize_session=False)
        )
        self.db.expunge(extraction)
        await self.aggregator.on_extraction_deleted(user_id, text_length)
        logger.info(f"Deleted extraction {extraction_id} for user {user_id}")
