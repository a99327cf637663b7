from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError

from textextract.core.exceptions import ExtractionError
from textextract.core.logging import get_logger
from textextract.services.extraction.base import DocumentExtractor, ExtractionResult, PageResult
from textextract.services.extraction.ocr_worker import OCRWorker

logger = get_logger(__name__)


class PdfExtractor(DocumentExtractor):
    """Render every page to an image and OCR it; confidence is the mean over pages."""

    def __init__(self, worker: OCRWorker, dpi: int = 300):
        self.worker = worker
        self.dpi = dpi

    def extract(self, file_data: bytes, filename: str) -> ExtractionResult:
        try:
            images = convert_from_bytes(file_data, dpi=self.dpi)
        except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as e:
            raise ExtractionError(f"Failed to render PDF {filename}: {e}") from e

        pages = []
        for page_number, image in enumerate(images, start=1):
            ocr_page = self.worker.recognize(image)
            pages.append(PageResult(page_number=page_number, text=ocr_page.text, confidence=ocr_page.confidence))

        if not any(p.text.strip() for p in pages):
            raise ExtractionError(f"No text found in {filename}")

        text = "\n".join(f"--- Page {p.page_number} ---\n{p.text}\n" for p in pages).strip()
        confidence = sum(p.confidence for p in pages) / len(pages) if pages else 0.0

        logger.info(f"OCR on {filename}: {len(pages)} pages, mean confidence {confidence:.2f}")

        return ExtractionResult(
            text=text,
            confidence=confidence,
            extraction_method="tesseract_ocr",
            pages=pages,
        )
