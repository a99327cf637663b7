from textextract.core.exceptions import UnsupportedTypeError
from textextract.services.extraction.base import DocumentExtractor
from textextract.services.extraction.image_extractor import ImageExtractor
from textextract.services.extraction.ocr_worker import OCRWorker
from textextract.services.extraction.pdf_extractor import PdfExtractor
from textextract.services.extraction.txt_extractor import TxtExtractor


class ExtractorFactory:
    def __init__(self, worker: OCRWorker, pdf_dpi: int = 300):
        self.worker = worker
        self.pdf_dpi = pdf_dpi

    def get_extractor(self, mime_type: str) -> DocumentExtractor:
        mime_type = (mime_type or "").lower()
        if mime_type == "application/pdf":
            return PdfExtractor(self.worker, dpi=self.pdf_dpi)
        if mime_type.startswith("image/"):
            return ImageExtractor(self.worker)
        if mime_type.startswith("text/"):
            return TxtExtractor()
        raise UnsupportedTypeError(mime_type or "unknown")
