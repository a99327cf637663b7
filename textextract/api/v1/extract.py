import base64
import binascii
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.config import settings
from textextract.core.database import get_async_session
from textextract.core.exceptions import ValidationError
from textextract.dependencies import build_workflow, get_llm_transport, get_ocr_worker, resolve_api_key
from textextract.schemas.common import ApiResponse
from textextract.schemas.extraction import (
    BatchExtractionRequest,
    BatchExtractionResponse,
    BatchFile,
    BatchItemResult,
    ExtractionData,
    ExtractionRequest,
)
from textextract.services.extraction.ocr_worker import OCRWorker
from textextract.services.workflow import ExtractionSuccess, FileInput, check_batch

router = APIRouter(prefix="/extract-text", tags=["Extraction"])


def decode_file_data(file_data: str, file_name: str) -> bytes:
    """Decode a base64 payload, accepting an optional ``data:<mime>;base64,`` prefix."""
    payload = file_data.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 file data for {file_name}") from e


def _batch_file_input(item: BatchFile) -> FileInput:
    # a bad payload fails only its own file once the batch runs
    try:
        data = decode_file_data(item.file_data, item.file_name)
    except ValidationError as e:
        return FileInput(file_name=item.file_name, file_type=item.file_type, data=b"", decode_error=e.message)
    return FileInput(file_name=item.file_name, file_type=item.file_type, data=data)


def _to_data(outcome: ExtractionSuccess) -> ExtractionData:
    return ExtractionData(
        extracted_text=outcome.extracted_text,
        confidence_score=outcome.confidence_score,
        processing_time=outcome.processing_time_ms,
        file_name=outcome.file_name,
        extraction_id=outcome.extraction_id,
        extraction_method=outcome.extraction_method,
        enhanced=outcome.enhanced,
    )


@router.post("", response_model=ApiResponse[ExtractionData])
async def extract_text(
    request: ExtractionRequest,
    db: AsyncSession = Depends(get_async_session),
    worker: OCRWorker = Depends(get_ocr_worker),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_llm_transport),
):
    file = FileInput(
        file_name=request.file_name,
        file_type=request.file_type,
        data=decode_file_data(request.file_data, request.file_name),
    )
    check_batch([file], settings.max_file_size_bytes)

    api_key = await resolve_api_key(db, request.openai_api_key, request.user_id)
    workflow = build_workflow(api_key, db, worker, transport=transport)

    outcome = await workflow.extract(file, user_id=request.user_id, enhance=request.enhance_text)
    return ApiResponse(data=_to_data(outcome))


@router.post("/batch", response_model=BatchExtractionResponse)
async def extract_batch(
    request: BatchExtractionRequest,
    db: AsyncSession = Depends(get_async_session),
    worker: OCRWorker = Depends(get_ocr_worker),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_llm_transport),
):
    files = [_batch_file_input(item) for item in request.files]
    check_batch(files, settings.max_file_size_bytes)

    api_key = await resolve_api_key(db, request.openai_api_key, request.user_id)
    workflow = build_workflow(api_key, db, worker, transport=transport)

    outcomes = await workflow.process_batch(files, user_id=request.user_id, enhance=request.enhance_text)

    results = []
    for outcome in outcomes:
        if isinstance(outcome, ExtractionSuccess):
            results.append(BatchItemResult(file_name=outcome.file_name, success=True, data=_to_data(outcome)))
        else:
            results.append(BatchItemResult(file_name=outcome.file_name, success=False, error=outcome.error))

    successful = sum(1 for result in results if result.success)
    return BatchExtractionResponse(
        results=results,
        total=len(results),
        successful=successful,
        failed=len(results) - successful,
    )
