from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DateRange(BaseModel):
    start: datetime
    end: datetime


class AnalyticsRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    date_range: Optional[DateRange] = None


class UserAnalyticsSummary(BaseModel):
    total_extractions: int = 0
    total_files_processed: int = 0
    total_text_extracted: int = 0
    average_confidence: float = 0.0


class DailyExtractions(BaseModel):
    date: str
    extractions: int


class FileTypeCount(BaseModel):
    type: str
    count: int
    color: str


class ConfidenceBucket(BaseModel):
    range: str
    count: int


class AnalyticsData(BaseModel):
    user_analytics: UserAnalyticsSummary
    daily_extractions: list[DailyExtractions]
    file_type_distribution: list[FileTypeCount]
    confidence_distribution: list[ConfidenceBucket]
