import pytest

from textextract.core.exceptions import UnsupportedTypeError
from textextract.services.extraction.factory import ExtractorFactory
from textextract.services.extraction.image_extractor import ImageExtractor
from textextract.services.extraction.ocr_worker import OCRWorker
from textextract.services.extraction.pdf_extractor import PdfExtractor
from textextract.services.extraction.txt_extractor import TxtExtractor


@pytest.fixture
def factory() -> ExtractorFactory:
    return ExtractorFactory(OCRWorker(), pdf_dpi=150)


class TestExtractorFactory:
    def test_get_pdf_extractor(self, factory):
        extractor = factory.get_extractor("application/pdf")
        assert isinstance(extractor, PdfExtractor)
        assert extractor.dpi == 150

    @pytest.mark.parametrize("mime_type", ["image/png", "image/jpeg", "IMAGE/TIFF"])
    def test_get_image_extractor(self, factory, mime_type):
        assert isinstance(factory.get_extractor(mime_type), ImageExtractor)

    @pytest.mark.parametrize("mime_type", ["text/plain", "text/csv", "text/markdown"])
    def test_get_txt_extractor(self, factory, mime_type):
        assert isinstance(factory.get_extractor(mime_type), TxtExtractor)

    def test_word_documents_need_the_ai_path(self, factory):
        with pytest.raises(UnsupportedTypeError):
            factory.get_extractor("application/vnd.openxmlformats-officedocument.wordprocessingml.document")

    def test_unsupported_type_raises(self, factory):
        with pytest.raises(UnsupportedTypeError):
            factory.get_extractor("application/x-executable")
