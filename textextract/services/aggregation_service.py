"""
Per-user running totals over extraction records.

Inserts go through a single ``INSERT .. ON CONFLICT (user_id) DO UPDATE`` so
concurrent extractions for one user cannot lose updates; the new mean is
computed from the row's current values inside the statement. Deletes
recompute the mean from the remaining records instead of reversing the
running average.
"""

from typing import Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.logging import get_logger
from textextract.models.base import utcnow
from textextract.models.extraction import Extraction, UserAnalytics

logger = get_logger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _floored(column, amount):
    return case((column > amount, column - amount), else_=0)


class AnalyticsAggregator:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str) -> Optional[UserAnalytics]:
        result = await self.db.execute(
            select(UserAnalytics)
            .where(UserAnalytics.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def on_extraction_created(self, user_id: str, text_length: int, confidence: float) -> None:
        insert = _UPSERT_DIALECTS.get(self.db.bind.dialect.name)
        if insert is None:
            await self._locked_increment(user_id, text_length, confidence)
            return

        stmt = insert(UserAnalytics).values(
            user_id=user_id,
            total_extractions=1,
            total_files_processed=1,
            total_text_extracted=text_length,
            average_confidence=confidence,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserAnalytics.user_id],
            set_={
                "total_extractions": UserAnalytics.total_extractions + 1,
                "total_files_processed": UserAnalytics.total_files_processed + 1,
                "total_text_extracted": UserAnalytics.total_text_extracted + stmt.excluded.total_text_extracted,
                "average_confidence": (
                    UserAnalytics.average_confidence * UserAnalytics.total_extractions
                    + stmt.excluded.average_confidence
                )
                / (UserAnalytics.total_extractions + 1),
                "updated_at": utcnow(),
            },
        )
        await self.db.execute(stmt)
        await self.db.flush()

    async def _locked_increment(self, user_id: str, text_length: int, confidence: float) -> None:
        result = await self.db.execute(
            select(UserAnalytics).where(UserAnalytics.user_id == user_id).with_for_update()
        )
        analytics = result.scalar_one_or_none()
        if analytics is None:
            self.db.add(
                UserAnalytics(
                    user_id=user_id,
                    total_extractions=1,
                    total_files_processed=1,
                    total_text_extracted=text_length,
                    average_confidence=confidence,
                )
            )
        else:
            new_count = analytics.total_extractions + 1
            analytics.average_confidence = (
                analytics.average_confidence * analytics.total_extractions + confidence
            ) / new_count
            analytics.total_extractions = new_count
            analytics.total_files_processed += 1
            analytics.total_text_extracted += text_length
        await self.db.flush()

    async def on_extraction_deleted(self, user_id: str, text_length: int) -> None:
        """Run after the record itself has been deleted in the same transaction."""
        remaining_mean = (
            select(func.avg(Extraction.confidence_score))
            .where(Extraction.user_id == user_id)
            .scalar_subquery()
        )
        await self.db.execute(
            update(UserAnalytics)
            .where(UserAnalytics.user_id == user_id)
            .values(
                total_extractions=_floored(UserAnalytics.total_extractions, 1),
                total_files_processed=_floored(UserAnalytics.total_files_processed, 1),
                total_text_extracted=_floored(UserAnalytics.total_text_extracted, text_length),
                average_confidence=func.coalesce(remaining_mean, 0.0),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()

    async def on_extraction_text_changed(self, user_id: str, length_delta: int) -> None:
        if length_delta == 0:
            return
        if length_delta > 0:
            new_total = UserAnalytics.total_text_extracted + length_delta
        else:
            new_total = _floored(UserAnalytics.total_text_extracted, -length_delta)
        await self.db.execute(
            update(UserAnalytics)
            .where(UserAnalytics.user_id == user_id)
            .values(total_text_extracted=new_total, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
