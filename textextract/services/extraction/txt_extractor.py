from charset_normalizer import from_bytes

from textextract.core.logging import get_logger
from textextract.services.extraction.base import DocumentExtractor, ExtractionResult, PageResult

logger = get_logger(__name__)

PLAIN_TEXT_CONFIDENCE = 0.99


class TxtExtractor(DocumentExtractor):
    def extract(self, file_data: bytes, filename: str) -> ExtractionResult:
        # Detect encoding
        detection = from_bytes(file_data).best()
        if detection:
            text = str(detection)
            encoding = detection.encoding
        else:
            text = file_data.decode("utf-8", errors="replace")
            encoding = "utf-8"

        logger.debug(f"Read {filename} as {encoding}")

        return ExtractionResult(
            text=text,
            confidence=PLAIN_TEXT_CONFIDENCE,
            extraction_method="plain_text",
            pages=[PageResult(page_number=1, text=text, confidence=PLAIN_TEXT_CONFIDENCE)],
        )
