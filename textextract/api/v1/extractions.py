import uuid
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.database import get_async_session
from textextract.schemas.common import ApiResponse, SuccessResponse
from textextract.schemas.extraction import (
    ExtractionListData,
    ExtractionQuery,
    ExtractionResponse,
    ExtractionTextUpdate,
)
from textextract.services.extraction_service import ExtractionService

router = APIRouter(prefix="/extractions", tags=["Extractions"])


async def _list_extractions(db: AsyncSession, query: ExtractionQuery) -> ApiResponse[ExtractionListData]:
    service = ExtractionService(db)
    extractions, total = await service.list_extractions(
        user_id=query.user_id,
        limit=query.limit,
        offset=query.offset,
        search=query.search,
        file_type=query.file_type,
    )
    return ApiResponse(
        data=ExtractionListData(
            extractions=[ExtractionResponse.model_validate(e) for e in extractions],
            total=total,
            page=query.offset // query.limit + 1,
            limit=query.limit,
        )
    )


@router.get("", response_model=ApiResponse[ExtractionListData])
async def list_extractions(
    user_id: str = Query(..., min_length=1),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    search: Optional[str] = Query(default=None),
    file_type: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_async_session),
):
    query = ExtractionQuery(user_id=user_id, limit=limit, offset=offset, search=search, file_type=file_type)
    return await _list_extractions(db, query)


@router.post("/query", response_model=ApiResponse[ExtractionListData])
async def query_extractions(
    query: ExtractionQuery,
    db: AsyncSession = Depends(get_async_session),
):
    return await _list_extractions(db, query)


@router.get("/{extraction_id}", response_model=ApiResponse[ExtractionResponse])
async def get_extraction(
    extraction_id: uuid.UUID,
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_async_session),
):
    extraction = await ExtractionService(db).get_extraction(extraction_id, user_id)
    return ApiResponse(data=ExtractionResponse.model_validate(extraction))


@router.patch("/{extraction_id}", response_model=ApiResponse[ExtractionResponse])
async def update_extraction_text(
    extraction_id: uuid.UUID,
    update: ExtractionTextUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    extraction = await ExtractionService(db).update_text(extraction_id, update.user_id, update.extracted_text)
    await db.commit()
    return ApiResponse(data=ExtractionResponse.model_validate(extraction))


@router.delete("/{extraction_id}", response_model=SuccessResponse)
async def delete_extraction(
    extraction_id: uuid.UUID,
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_async_session),
):
    await ExtractionService(db).delete_extraction(extraction_id, user_id)
    await db.commit()
    return SuccessResponse(message="Extraction deleted")


@router.get("/{extraction_id}/download", response_class=PlainTextResponse)
async def download_extraction(
    extraction_id: uuid.UUID,
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_async_session),
):
    extraction = await ExtractionService(db).get_extraction(extraction_id, user_id)
    filename = f"{extraction.file_name}_extracted.txt"
    return PlainTextResponse(
        extraction.extracted_text,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
