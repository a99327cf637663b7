import time

from textextract.core.logging import get_logger
from textextract.services.extraction.base import ExtractionResult
from textextract.services.extraction.factory import ExtractorFactory
from textextract.services.extraction.ocr_worker import OCRWorker

logger = get_logger(__name__)


class LocalExtractor:
    """Extraction without a generative service: Tesseract for PDFs and images, direct read for text."""

    def __init__(self, worker: OCRWorker, pdf_dpi: int = 300):
        self.factory = ExtractorFactory(worker, pdf_dpi=pdf_dpi)

    def extract_from_document(self, file_data: bytes, mime_type: str, filename: str) -> ExtractionResult:
        start = time.perf_counter()
        extractor = self.factory.get_extractor(mime_type)
        result = extractor.extract(file_data, filename)
        result.processing_time_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(f"{filename} extracted locally via {result.extraction_method} in {result.processing_time_ms}ms")
        return result
