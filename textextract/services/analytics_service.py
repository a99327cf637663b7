"""
Analytics view assembly.

Combines the stored per-user aggregate with distributions computed over the
user's extraction records: daily counts for the last seven days, a breakdown
by top-level MIME family and the three fixed confidence buckets.
"""

from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.logging import get_logger
from textextract.models.extraction import Extraction
from textextract.services.aggregation_service import AnalyticsAggregator

logger = get_logger(__name__)

DAILY_WINDOW_DAYS = 7

FILE_TYPE_COLORS = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#06B6D4"]

HIGH_BUCKET = "High (80-100%)"
MEDIUM_BUCKET = "Medium (60-79%)"
LOW_BUCKET = "Low (0-59%)"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def daily_extractions(created: Iterable[datetime], today: Optional[date] = None) -> list[dict]:
    today = today or datetime.now(timezone.utc).date()
    days = [today - timedelta(days=offset) for offset in range(DAILY_WINDOW_DAYS - 1, -1, -1)]
    counts = Counter(_as_utc(value).date() for value in created)
    return [{"date": day.isoformat(), "extractions": counts.get(day, 0)} for day in days]


def file_type_distribution(file_types: Iterable[str]) -> list[dict]:
    # Counter keeps first-seen order, which fixes the color assignment
    counts = Counter((file_type or "").split("/")[0] for file_type in file_types)
    return [
        {
            "type": family[:1].upper() + family[1:],
            "count": count,
            "color": FILE_TYPE_COLORS[index % len(FILE_TYPE_COLORS)],
        }
        for index, (family, count) in enumerate(counts.items())
    ]


def confidence_bucket(confidence: float) -> str:
    percent = confidence * 100
    if percent >= 80:
        return HIGH_BUCKET
    if percent >= 60:
        return MEDIUM_BUCKET
    return LOW_BUCKET


def confidence_distribution(scores: Iterable[float]) -> list[dict]:
    counts = {HIGH_BUCKET: 0, MEDIUM_BUCKET: 0, LOW_BUCKET: 0}
    for score in scores:
        counts[confidence_bucket(score)] += 1
    return [{"range": label, "count": count} for label, count in counts.items()]


class AnalyticsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_analytics(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> dict:
        analytics = await AnalyticsAggregator(self.db).get(user_id)

        query = select(Extraction).where(Extraction.user_id == user_id)
        if start is not None and end is not None:
            if end.time() == time.min and end.tzinfo is None:
                # A bare end date covers the whole day
                end = end + timedelta(days=1) - timedelta(microseconds=1)
            query = query.where(Extraction.created_at >= start, Extraction.created_at <= end)
        query = query.order_by(Extraction.created_at.desc())

        result = await self.db.execute(query)
        extractions = list(result.scalars().all())
        logger.debug(f"Building analytics for {user_id} over {len(extractions)} extractions")

        if analytics is None:
            summary = {
                "total_extractions": 0,
                "total_files_processed": 0,
                "total_text_extracted": 0,
                "average_confidence": 0.0,
            }
        else:
            summary = {
                "total_extractions": analytics.total_extractions,
                "total_files_processed": analytics.total_files_processed,
                "total_text_extracted": analytics.total_text_extracted,
                "average_confidence": analytics.average_confidence,
            }

        return {
            "user_analytics": summary,
            "daily_extractions": daily_extractions((e.created_at for e in extractions), today=today),
            "file_type_distribution": file_type_distribution(e.file_type for e in extractions),
            "confidence_distribution": confidence_distribution(e.confidence_score for e in extractions),
        }
