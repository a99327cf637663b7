from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.database import get_async_session
from textextract.core.exceptions import ValidationError
from textextract.schemas.analytics import AnalyticsData, AnalyticsRequest
from textextract.schemas.common import ApiResponse
from textextract.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("", response_model=ApiResponse[AnalyticsData])
async def get_analytics(
    user_id: str = Query(..., min_length=1),
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    db: AsyncSession = Depends(get_async_session),
):
    if (start is None) != (end is None):
        raise ValidationError("Both start and end are required for a date range")
    data = await AnalyticsService(db).get_analytics(user_id, start=start, end=end)
    return ApiResponse(data=AnalyticsData.model_validate(data))


@router.post("", response_model=ApiResponse[AnalyticsData])
async def query_analytics(
    request: AnalyticsRequest,
    db: AsyncSession = Depends(get_async_session),
):
    date_range = request.date_range
    data = await AnalyticsService(db).get_analytics(
        request.user_id,
        start=date_range.start if date_range else None,
        end=date_range.end if date_range else None,
    )
    return ApiResponse(data=AnalyticsData.model_validate(data))
