import base64
import time

from textextract.config import Settings, settings as default_settings
from textextract.core.exceptions import ExternalServiceError, ExtractionError
from textextract.core.logging import get_logger
from textextract.services.confidence import calculate_confidence, calculate_document_confidence
from textextract.services.extraction.base import ExtractionResult
from textextract.services.llm_service import LLMService
from textextract.services.refusal import is_refusal

logger = get_logger(__name__)

FALLBACK_MAX_CONFIDENCE = 0.7
FALLBACK_PAYLOAD_CHARS = 1000

IMAGE_SYSTEM_PROMPT = (
    "You are an expert OCR text extraction specialist. Extract ALL text from images with "
    "maximum accuracy, preserving formatting, structure, and layout. Always provide the "
    "extracted text without any commentary or refusal."
)

IMAGE_USER_PROMPT = (
    "Please extract ALL text from this image. Preserve the original formatting, structure, "
    "and layout as much as possible. If there are tables, maintain their structure. If it's "
    "a document like an invoice or receipt, maintain the document structure. Return ONLY the "
    "extracted text content, no explanations or commentary."
)

DOCUMENT_SYSTEM_PROMPT = """You are a professional document text extraction system. Your only job is to extract text from documents and return it.

RULES:
1. Extract ALL visible text from the document provided
2. Preserve original formatting, structure, and layout
3. For invoices/receipts: keep headers, line items, totals, dates
4. For reports: keep headings, sections, tables, data structure
5. For forms: keep field names and values
6. Return ONLY the extracted text content
7. No commentary, no explanations"""

WORD_MIME_MARKERS = ("word", "document")


def build_document_prompt(encoded: str, mime_type: str, filename: str) -> str:
    if mime_type == "application/pdf":
        return (
            f"Extract all text from this PDF document ({filename}). "
            f"Return only the text content with preserved formatting:\n\n"
            f"data:application/pdf;base64,{encoded}"
        )
    if any(marker in mime_type for marker in WORD_MIME_MARKERS):
        return (
            f"Extract all text from this Word document ({filename}). "
            f"Preserve headings, paragraphs, lists, and tables:\n\n"
            f"data:{mime_type};base64,{encoded}"
        )
    return (
        f"Extract all text from this {mime_type} document ({filename}). "
        f"Return the complete text content:\n\n"
        f"data:{mime_type};base64,{encoded}"
    )


def build_fallback_prompt(encoded: str, mime_type: str, filename: str) -> str:
    return (
        "This is a document text extraction task. Extract the text content from this document "
        "and return it immediately. Do not explain, just extract the text:\n\n"
        f"Document type: {mime_type}\n"
        f"File: {filename}\n"
        f"Content: {encoded[:FALLBACK_PAYLOAD_CHARS]}..."
    )


class AIExtractor:
    """Text extraction through a vision/text capable chat completions model."""

    def __init__(self, llm: LLMService, config: Settings | None = None):
        self.llm = llm
        self.config = config or default_settings

    async def extract_from_image(self, image_data: bytes, mime_type: str = "image/jpeg") -> ExtractionResult:
        start = time.perf_counter()
        encoded = base64.b64encode(image_data).decode("ascii")

        text = await self.llm.chat_completion(
            [
                {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": IMAGE_USER_PROMPT},
                        {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
                    ],
                },
            ],
            model=self.config.openai_vision_model,
            max_tokens=self.config.openai_max_tokens,
            temperature=0.1,
        )

        return ExtractionResult(
            text=text,
            confidence=calculate_confidence(text),
            extraction_method="openai_vision",
            processing_time_ms=_elapsed_ms(start),
        )

    async def extract_from_document(self, file_data: bytes, mime_type: str, filename: str) -> ExtractionResult:
        start = time.perf_counter()
        encoded = base64.b64encode(file_data).decode("ascii")

        text = await self.llm.chat_completion(
            [
                {"role": "system", "content": DOCUMENT_SYSTEM_PROMPT},
                {"role": "user", "content": build_document_prompt(encoded, mime_type, filename)},
            ],
            model=self.config.openai_document_model,
            max_tokens=self.config.openai_max_tokens,
        )

        if not text:
            raise ExtractionError("No text could be extracted from this document")

        if not is_refusal(text):
            return ExtractionResult(
                text=text,
                confidence=calculate_document_confidence(text, mime_type),
                extraction_method="openai_document",
                processing_time_ms=_elapsed_ms(start),
            )

        logger.warning(f"Model declined to extract {filename}, retrying with {self.config.openai_fallback_model}")
        try:
            text = await self.llm.chat_completion(
                [{"role": "user", "content": build_fallback_prompt(encoded, mime_type, filename)}],
                model=self.config.openai_fallback_model,
                max_tokens=self.config.openai_fallback_max_tokens,
            )
        except ExternalServiceError as e:
            raise ExtractionError(f"Model declined to extract {filename} and the fallback failed: {e.message}") from e

        if not text:
            raise ExtractionError("No text could be extracted from this document")

        return ExtractionResult(
            text=text,
            confidence=min(calculate_document_confidence(text, mime_type), FALLBACK_MAX_CONFIDENCE),
            extraction_method="openai_fallback",
            processing_time_ms=_elapsed_ms(start),
            used_fallback=True,
        )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
