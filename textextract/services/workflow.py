"""
Per-file extraction workflow.

Each file moves through validate, extract, optional enhance, persist and
aggregate update. Only validation and extraction can fail a file; enhancement,
persistence and aggregate updates degrade and are logged. Batches are
processed sequentially and yield one outcome per file in submission order.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from textextract.config import settings
from textextract.core.exceptions import (
    ConfigurationError,
    ExtractionError,
    FileTooLargeError,
    TextExtractError,
    UnsupportedTypeError,
    ValidationError,
)
from textextract.core.logging import get_logger
from textextract.services.enhancement_service import EnhancementService
from textextract.services.extraction.ai_extractor import AIExtractor
from textextract.services.extraction.base import ExtractionResult
from textextract.services.extraction.local_extractor import LocalExtractor
from textextract.services.extraction_service import ExtractionService

logger = get_logger(__name__)

WORD_MIME_TYPES = {
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class WorkflowState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    EXTRACTING = "extracting"
    REFUSAL_RETRY = "refusal_retry"
    ENHANCING = "enhancing"
    PERSISTING = "persisting"
    AGGREGATE_UPDATING = "aggregate_updating"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FileInput:
    file_name: str
    file_type: str
    data: bytes
    decode_error: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class ExtractionSuccess:
    file_name: str
    extracted_text: str
    confidence_score: float
    processing_time_ms: int
    extraction_method: str
    extraction_id: Optional[uuid.UUID] = None
    enhanced: bool = False
    states: list[WorkflowState] = field(default_factory=list)

    success = True


@dataclass
class ExtractionFailure:
    file_name: str
    error: str
    status_code: int = 500
    failed_in: WorkflowState = WorkflowState.EXTRACTING
    states: list[WorkflowState] = field(default_factory=list)

    success = False


ExtractionOutcome = Union[ExtractionSuccess, ExtractionFailure]


def is_supported_type(mime_type: str) -> bool:
    mime_type = (mime_type or "").lower()
    return (
        mime_type.startswith("image/")
        or mime_type.startswith("text/")
        or mime_type == "application/pdf"
        or mime_type in WORD_MIME_TYPES
    )


def check_batch(files: list[FileInput], max_file_size_bytes: int) -> None:
    """Reject an empty batch, or the whole batch when any file is over the size limit."""
    if not files:
        raise ValidationError("No files provided")
    oversized = [f.file_name for f in files if f.size > max_file_size_bytes]
    if oversized:
        raise FileTooLargeError(oversized, max_file_size_bytes // (1024 * 1024))


class _Run:
    """State trail for one file."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        self.state = WorkflowState.IDLE
        self.states = [WorkflowState.IDLE]

    def enter(self, state: WorkflowState) -> None:
        logger.debug(f"{self.file_name}: {self.state.value} -> {state.value}")
        self.state = state
        self.states.append(state)


class ExtractionWorkflow:
    def __init__(
        self,
        ai_extractor: Optional[AIExtractor] = None,
        local_extractor: Optional[LocalExtractor] = None,
        enhancer: Optional[EnhancementService] = None,
        db: Optional[AsyncSession] = None,
        max_file_size_bytes: Optional[int] = None,
    ):
        self.ai_extractor = ai_extractor
        self.local_extractor = local_extractor
        self.enhancer = enhancer
        self.db = db
        self.max_file_size_bytes = max_file_size_bytes or settings.max_file_size_bytes

    @property
    def max_file_size_mb(self) -> int:
        return self.max_file_size_bytes // (1024 * 1024)

    def validate_batch(self, files: list[FileInput]) -> None:
        check_batch(files, self.max_file_size_bytes)

    def _validate_file(self, file: FileInput) -> None:
        if file.decode_error:
            raise ValidationError(file.decode_error)
        if not file.file_name:
            raise ValidationError("Missing required field: file_name")
        if not file.data:
            raise ValidationError(f"File {file.file_name} is empty")
        if file.size > self.max_file_size_bytes:
            raise FileTooLargeError([file.file_name], self.max_file_size_mb)
        if not is_supported_type(file.file_type):
            raise UnsupportedTypeError(file.file_type or "unknown")

    async def extract(self, file: FileInput, user_id: Optional[str] = None, enhance: bool = False) -> ExtractionSuccess:
        """Run one file through the workflow, raising on validation or extraction failure."""
        return await self._run(file, user_id=user_id, enhance=enhance, raise_errors=True)

    async def process_batch(
        self,
        files: list[FileInput],
        user_id: Optional[str] = None,
        enhance: bool = False,
    ) -> list[ExtractionOutcome]:
        self.validate_batch(files)
        outcomes = []
        for file in files:
            outcomes.append(await self._run(file, user_id=user_id, enhance=enhance, raise_errors=False))
        succeeded = sum(1 for outcome in outcomes if outcome.success)
        logger.info(f"Batch finished: {succeeded}/{len(outcomes)} files extracted")
        return outcomes

    async def _run(self, file: FileInput, user_id: Optional[str], enhance: bool, raise_errors: bool):
        run = _Run(file.file_name)
        start = time.perf_counter()

        try:
            run.enter(WorkflowState.VALIDATING)
            self._validate_file(file)

            run.enter(WorkflowState.EXTRACTING)
            result = await self._extract(file)
            if result.used_fallback:
                run.enter(WorkflowState.REFUSAL_RETRY)
            if result.is_empty:
                raise ExtractionError()
        except TextExtractError as e:
            failed_in = run.state
            run.enter(WorkflowState.FAILED)
            logger.warning(f"Extraction of {file.file_name} failed in {failed_in.value}: {e.message}")
            if raise_errors:
                raise
            return ExtractionFailure(
                file_name=file.file_name,
                error=e.message,
                status_code=e.status_code,
                failed_in=failed_in,
                states=run.states,
            )
        except Exception as e:
            failed_in = run.state
            run.enter(WorkflowState.FAILED)
            logger.exception(f"Unexpected error extracting {file.file_name}")
            if raise_errors:
                raise
            return ExtractionFailure(file_name=file.file_name, error=str(e), failed_in=failed_in, states=run.states)

        text = result.text
        confidence = result.confidence
        enhanced = False

        if enhance and self.enhancer is not None:
            run.enter(WorkflowState.ENHANCING)
            try:
                enhancement = await self.enhancer.enhance(
                    text, context_hint=f"Extracted from {file.file_name} ({file.file_type})"
                )
            except TextExtractError as e:
                logger.warning(f"Skipping enhancement of {file.file_name}: {e.message}")
            else:
                text = enhancement.enhanced_text
                enhanced = enhancement.enhanced
                confidence = max(confidence, enhancement.confidence)

        processing_time_ms = int((time.perf_counter() - start) * 1000)
        extraction_id = None
        if user_id and self.db is not None:
            extraction_id = await self._persist(run, file, user_id, text, confidence, processing_time_ms)

        run.enter(WorkflowState.DONE)
        return ExtractionSuccess(
            file_name=file.file_name,
            extracted_text=text,
            confidence_score=confidence,
            processing_time_ms=processing_time_ms,
            extraction_method=result.extraction_method,
            extraction_id=extraction_id,
            enhanced=enhanced,
            states=run.states,
        )

    async def _extract(self, file: FileInput) -> ExtractionResult:
        mime_type = (file.file_type or "").lower()
        if self.ai_extractor is not None:
            if mime_type.startswith("image/"):
                return await self.ai_extractor.extract_from_image(file.data, mime_type)
            return await self.ai_extractor.extract_from_document(file.data, mime_type, file.file_name)
        if self.local_extractor is not None:
            return await asyncio.to_thread(
                self.local_extractor.extract_from_document, file.data, mime_type, file.file_name
            )
        raise ConfigurationError("No extraction backend is configured")

    async def _persist(
        self,
        run: _Run,
        file: FileInput,
        user_id: str,
        text: str,
        confidence: float,
        processing_time_ms: int,
    ) -> Optional[uuid.UUID]:
        service = ExtractionService(self.db)

        run.enter(WorkflowState.PERSISTING)
        try:
            extraction = await service.create_extraction(
                user_id=user_id,
                file_name=file.file_name,
                file_type=file.file_type,
                file_size_bytes=file.size,
                extracted_text=text,
                confidence_score=confidence,
                processing_time_ms=processing_time_ms,
            )
            extraction_id = extraction.id

            run.enter(WorkflowState.AGGREGATE_UPDATING)
            await service.aggregator.on_extraction_created(user_id, len(text), extraction.confidence_score)
            await self.db.commit()
        except Exception:
            # record and aggregate are committed together or not at all
            logger.exception(
                f"Failed to save extraction of {file.file_name} in {run.state.value}, returning unsaved result"
            )
            await self.db.rollback()
            return None

        return extraction_id
