"""
Tesseract OCR worker with an explicit lifecycle.

The worker is created once by the application, initialised lazily on first
use and released with ``close()`` (or by leaving a ``with`` block). pytesseract
runs one Tesseract subprocess per call, so a single initialised worker can be
shared by concurrent callers.

pytesseract only reads the Tesseract command from a module-level setting, so
the command is claimed once per process. A second worker asking for a
different command is a configuration error.
"""

import threading
from dataclasses import dataclass

import pytesseract
from PIL import Image

from textextract.core.exceptions import ConfigurationError, ExtractionError
from textextract.core.logging import get_logger

logger = get_logger(__name__)

_cmd_lock = threading.Lock()
_process_tesseract_cmd: str | None = None


def _claim_tesseract_cmd(tesseract_cmd: str) -> None:
    global _process_tesseract_cmd
    with _cmd_lock:
        if _process_tesseract_cmd is not None and _process_tesseract_cmd != tesseract_cmd:
            raise ConfigurationError(
                f"Tesseract command is already set to {_process_tesseract_cmd} for this process"
            )
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        _process_tesseract_cmd = tesseract_cmd


@dataclass
class OCRPage:
    text: str
    confidence: float


class OCRWorker:
    def __init__(self, languages: str = "eng", tesseract_cmd: str | None = None):
        self.languages = languages
        self.tesseract_cmd = tesseract_cmd
        self._lock = threading.Lock()
        self._version: str | None = None
        self._closed = False

    @property
    def initialized(self) -> bool:
        return self._version is not None

    def start(self) -> None:
        with self._lock:
            if self._closed:
                raise ExtractionError("OCR worker has been closed")
            if self._version is not None:
                return
            if self.tesseract_cmd:
                _claim_tesseract_cmd(self.tesseract_cmd)
            try:
                self._version = str(pytesseract.get_tesseract_version())
            except pytesseract.TesseractNotFoundError as e:
                raise ConfigurationError("Tesseract is not installed or not on PATH") from e
            logger.info(f"OCR worker initialised (tesseract {self._version}, lang={self.languages})")

    def recognize(self, image: Image.Image) -> OCRPage:
        """Run OCR on one image. Confidence is Tesseract's mean word confidence in 0..1."""
        if not self.initialized:
            self.start()

        try:
            text = pytesseract.image_to_string(image, lang=self.languages)
            data = pytesseract.image_to_data(
                image, lang=self.languages, output_type=pytesseract.Output.DICT
            )
        except pytesseract.TesseractError as e:
            raise ExtractionError(f"Failed to extract text with OCR: {e}") from e

        confidences = []
        for conf in data.get("conf", []):
            try:
                value = float(conf)
            except (TypeError, ValueError):
                continue
            if value > 0:
                confidences.append(value)
        avg_confidence = sum(confidences) / len(confidences) / 100 if confidences else 0.0

        return OCRPage(text=text.strip(), confidence=min(max(avg_confidence, 0.0), 1.0))

    def close(self) -> None:
        with self._lock:
            if self._version is not None:
                logger.info("OCR worker released")
            self._version = None
            self._closed = True

    def __enter__(self) -> "OCRWorker":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
