import pytest

from textextract.services.refusal import is_refusal


class TestRefusalDetector:
    def test_apology_is_refusal(self):
        assert is_refusal("I'm sorry, I cannot process this") is True

    def test_receipt_text_is_not_refusal(self):
        assert is_refusal("Total: $42.00, Items: 3") is False

    @pytest.mark.parametrize(
        "text",
        [
            "UNABLE to read the attachment",
            "As an AI language model I do not open files",
            "This looks like base64 data",
            "I can’t help with that",
            "I am not able to decode it",
        ],
    )
    def test_markers_are_case_insensitive(self, text):
        assert is_refusal(text) is True

    def test_empty_is_not_refusal(self):
        assert is_refusal("") is False
        assert is_refusal(None) is False

    def test_legitimate_text_with_marker_is_flagged(self):
        assert is_refusal("Tenants cannot sublet the premises.") is True
