import io

from PIL import Image, UnidentifiedImageError

from textextract.core.exceptions import ExtractionError
from textextract.core.logging import get_logger
from textextract.services.extraction.base import DocumentExtractor, ExtractionResult, PageResult
from textextract.services.extraction.ocr_worker import OCRWorker

logger = get_logger(__name__)


class ImageExtractor(DocumentExtractor):
    def __init__(self, worker: OCRWorker):
        self.worker = worker

    def extract(self, file_data: bytes, filename: str) -> ExtractionResult:
        try:
            image = Image.open(io.BytesIO(file_data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ExtractionError(f"Could not read image {filename}: {e}") from e

        page = self.worker.recognize(image)
        logger.info(f"OCR on {filename}: {len(page.text)} chars, confidence {page.confidence:.2f}")

        return ExtractionResult(
            text=page.text,
            confidence=page.confidence,
            extraction_method="tesseract_ocr",
            pages=[PageResult(page_number=1, text=page.text, confidence=page.confidence)],
        )
