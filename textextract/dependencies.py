from typing import Optional

import httpx
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.config import settings
from textextract.core.exceptions import ConfigurationError
from textextract.services.enhancement_service import EnhancementService
from textextract.services.extraction.ai_extractor import AIExtractor
from textextract.services.extraction.local_extractor import LocalExtractor
from textextract.services.extraction.ocr_worker import OCRWorker
from textextract.services.llm_service import LLMService
from textextract.services.settings_service import SettingsService
from textextract.services.workflow import ExtractionWorkflow


def get_ocr_worker(request: Request) -> OCRWorker:
    worker = getattr(request.app.state, "ocr_worker", None)
    if worker is None:
        worker = OCRWorker(languages=settings.ocr_languages, tesseract_cmd=settings.tesseract_cmd)
        request.app.state.ocr_worker = worker
    return worker


def get_llm_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for outbound generative calls; ``None`` uses the network."""
    return None


async def resolve_api_key(db: AsyncSession, request_key: Optional[str], user_id: Optional[str]) -> str:
    """Request key first, then the user's stored key, then the server default."""
    if request_key and request_key.strip():
        return request_key.strip()
    if user_id:
        stored = await SettingsService(db).get_api_key(user_id)
        if stored:
            return stored
    return settings.openai_api_key


def build_workflow(
    api_key: str,
    db: AsyncSession,
    worker: OCRWorker,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ExtractionWorkflow:
    backend = settings.extraction_backend
    llm = LLMService(api_key, transport=transport)

    if backend == "ai" and not llm.configured:
        raise ConfigurationError("OpenAI API key is required for AI extraction")

    use_ai = backend == "ai" or (backend == "auto" and llm.configured)
    return ExtractionWorkflow(
        ai_extractor=AIExtractor(llm) if use_ai else None,
        local_extractor=None if use_ai else LocalExtractor(worker, pdf_dpi=settings.pdf_dpi),
        enhancer=EnhancementService(llm) if llm.configured else None,
        db=db,
        max_file_size_bytes=settings.max_file_size_bytes,
    )
