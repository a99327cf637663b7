from textextract.services.extraction.txt_extractor import TxtExtractor


class TestTxtExtractor:
    def test_extract_plain_text(self):
        extractor = TxtExtractor()
        data = b"Hello, this is a test document.\nIt has multiple lines."
        result = extractor.extract(data, "test.txt")

        assert result.text.startswith("Hello")
        assert result.extraction_method == "plain_text"
        assert result.confidence == 0.99
        assert len(result.pages) == 1

    def test_extract_empty_text(self):
        result = TxtExtractor().extract(b"", "empty.txt")

        assert result.text == ""
        assert result.is_empty

    def test_extract_utf8_text(self):
        data = "Unicode text: café, naïve, résumé, and a few more words to help detection.".encode("utf-8")
        result = TxtExtractor().extract(data, "unicode.txt")

        assert "café" in result.text
        assert "résumé" in result.text
