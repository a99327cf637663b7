import io
from unittest.mock import patch

import pytest
from PIL import Image

from textextract.core.exceptions import ConfigurationError, ExtractionError, UnsupportedTypeError
from textextract.services.extraction import ocr_worker
from textextract.services.extraction.image_extractor import ImageExtractor
from textextract.services.extraction.local_extractor import LocalExtractor
from textextract.services.extraction.ocr_worker import OCRWorker
from textextract.services.extraction.pdf_extractor import PdfExtractor


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def tesseract():
    with patch("textextract.services.extraction.ocr_worker.pytesseract") as mock_tesseract:
        mock_tesseract.get_tesseract_version.return_value = "5.3.0"
        mock_tesseract.image_to_string.return_value = "  Hello OCR world  "
        mock_tesseract.image_to_data.return_value = {"conf": ["-1", "90", "80", 70.0]}
        yield mock_tesseract


class TestOCRWorker:
    def test_lazy_start(self, tesseract):
        worker = OCRWorker(languages="eng+spa")
        assert worker.initialized is False

        page = worker.recognize(Image.new("RGB", (10, 10)))

        assert worker.initialized is True
        assert page.text == "Hello OCR world"
        assert page.confidence == pytest.approx(0.8)
        tesseract.get_tesseract_version.assert_called_once()
        assert tesseract.image_to_string.call_args.kwargs["lang"] == "eng+spa"

    def test_start_is_idempotent(self, tesseract):
        worker = OCRWorker()
        worker.start()
        worker.start()
        tesseract.get_tesseract_version.assert_called_once()

    def test_context_manager_closes(self, tesseract):
        with OCRWorker() as worker:
            assert worker.initialized
        assert not worker.initialized
        with pytest.raises(ExtractionError):
            worker.start()

    def test_missing_tesseract(self):
        with patch("textextract.services.extraction.ocr_worker.pytesseract.get_tesseract_version") as version:
            import pytesseract

            version.side_effect = pytesseract.TesseractNotFoundError()
            with pytest.raises(ConfigurationError):
                OCRWorker().start()

    def test_no_confident_words(self, tesseract):
        tesseract.image_to_data.return_value = {"conf": ["-1", "-1"]}
        page = OCRWorker().recognize(Image.new("RGB", (10, 10)))
        assert page.confidence == 0.0


class TestTesseractCommand:
    @pytest.fixture(autouse=True)
    def unclaimed_command(self, monkeypatch):
        monkeypatch.setattr(ocr_worker, "_process_tesseract_cmd", None)

    def test_command_applied_on_start(self, tesseract):
        OCRWorker(tesseract_cmd="/opt/tesseract/bin/tesseract").start()
        assert tesseract.pytesseract.tesseract_cmd == "/opt/tesseract/bin/tesseract"

    def test_same_command_can_be_shared(self, tesseract):
        OCRWorker(tesseract_cmd="/usr/bin/tesseract").start()
        OCRWorker(tesseract_cmd="/usr/bin/tesseract").start()
        assert tesseract.get_tesseract_version.call_count == 2

    def test_conflicting_command_rejected(self, tesseract):
        OCRWorker(tesseract_cmd="/opt/a/tesseract").start()

        other = OCRWorker(tesseract_cmd="/opt/b/tesseract")
        with pytest.raises(ConfigurationError):
            other.start()

        assert not other.initialized
        assert tesseract.pytesseract.tesseract_cmd == "/opt/a/tesseract"

    def test_default_command_left_alone(self, tesseract):
        OCRWorker(tesseract_cmd="/opt/a/tesseract").start()
        OCRWorker().start()
        assert tesseract.pytesseract.tesseract_cmd == "/opt/a/tesseract"


class TestImageExtractor:
    def test_extracts_with_engine_confidence(self, tesseract):
        result = ImageExtractor(OCRWorker()).extract(_png_bytes(), "scan.png")

        assert result.text == "Hello OCR world"
        assert result.confidence == pytest.approx(0.8)
        assert result.extraction_method == "tesseract_ocr"

    def test_unreadable_image(self, tesseract):
        with pytest.raises(ExtractionError):
            ImageExtractor(OCRWorker()).extract(b"not an image", "broken.png")


class TestPdfExtractor:
    def test_pages_are_joined_and_confidence_averaged(self, tesseract):
        tesseract.image_to_string.side_effect = ["First page", "Second page"]
        tesseract.image_to_data.side_effect = [{"conf": ["90"]}, {"conf": ["70"]}]
        pages = [Image.new("RGB", (10, 10)), Image.new("RGB", (10, 10))]

        with patch("textextract.services.extraction.pdf_extractor.convert_from_bytes", return_value=pages) as convert:
            result = PdfExtractor(OCRWorker(), dpi=200).extract(b"%PDF-1.4", "two.pdf")

        convert.assert_called_once_with(b"%PDF-1.4", dpi=200)
        assert result.text == "--- Page 1 ---\nFirst page\n\n--- Page 2 ---\nSecond page"
        assert result.confidence == pytest.approx(0.8)
        assert [p.page_number for p in result.pages] == [1, 2]

    def test_blank_pages_fail(self, tesseract):
        tesseract.image_to_string.return_value = "  \n "
        pages = [Image.new("RGB", (10, 10)), Image.new("RGB", (10, 10))]

        with patch("textextract.services.extraction.pdf_extractor.convert_from_bytes", return_value=pages):
            with pytest.raises(ExtractionError, match="No text found in blank.pdf"):
                PdfExtractor(OCRWorker()).extract(b"%PDF-1.4", "blank.pdf")

    def test_render_failure(self, tesseract):
        from pdf2image.exceptions import PDFPageCountError

        with patch(
            "textextract.services.extraction.pdf_extractor.convert_from_bytes",
            side_effect=PDFPageCountError("bad pdf"),
        ):
            with pytest.raises(ExtractionError):
                PdfExtractor(OCRWorker()).extract(b"garbage", "bad.pdf")


class TestLocalExtractor:
    def test_plain_text_is_timed(self):
        result = LocalExtractor(OCRWorker()).extract_from_document(b"plain text body", "text/plain", "a.txt")

        assert result.confidence == 0.99
        assert result.processing_time_ms >= 0

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedTypeError):
            LocalExtractor(OCRWorker()).extract_from_document(b"\x00", "application/zip", "a.zip")
