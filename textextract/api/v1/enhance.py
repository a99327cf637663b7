from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.database import get_async_session
from textextract.core.exceptions import ConfigurationError, ValidationError
from textextract.dependencies import get_llm_transport, resolve_api_key
from textextract.schemas.common import ApiResponse
from textextract.schemas.extraction import EnhanceData, EnhanceRequest
from textextract.services.enhancement_service import EnhancementService
from textextract.services.llm_service import LLMService

router = APIRouter(prefix="/enhance", tags=["Enhancement"])


@router.post("", response_model=ApiResponse[EnhanceData])
async def enhance_text(
    request: EnhanceRequest,
    db: AsyncSession = Depends(get_async_session),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_llm_transport),
):
    if not request.text.strip():
        raise ValidationError("No text provided for enhancement")

    api_key = await resolve_api_key(db, request.openai_api_key, request.user_id)
    llm = LLMService(api_key, transport=transport)
    if not llm.configured:
        raise ConfigurationError("OpenAI API key is required for text enhancement")

    result = await EnhancementService(llm).enhance(request.text, context_hint=request.context_hint)
    return ApiResponse(
        data=EnhanceData(
            enhanced_text=result.enhanced_text,
            confidence=result.confidence,
            enhanced=result.enhanced,
        )
    )
