"""
Surface-feature confidence scoring for text returned by generative extraction.

The chat completions API reports no per-token confidence, so the score is a
heuristic over the returned text. Local Tesseract extraction reports its own
word confidences and does not go through this module.
"""

import re

SHORT_TEXT_CONFIDENCE = 0.3
SHORT_TEXT_LENGTH = 10

IMAGE_MAX_CONFIDENCE = 0.98
DOCUMENT_MAX_CONFIDENCE = 0.95

SENTENCE_PUNCTUATION = re.compile(r"[.!?]")
DIGIT = re.compile(r"\d")
SPECIAL_CHARACTER = re.compile(r"[^\w\s]")
STRUCTURE_MARKER = re.compile(r"[:\-|]")


def _word_count(text: str) -> int:
    return len(text.split())


def _is_short(text: str | None) -> bool:
    return not text or len(text) < SHORT_TEXT_LENGTH


def calculate_confidence(text: str | None) -> float:
    """Score text extracted from an image (or of unknown provenance)."""
    if _is_short(text):
        return SHORT_TEXT_CONFIDENCE

    confidence = 0.5
    if _word_count(text) > 20:
        confidence += 0.2
    if SENTENCE_PUNCTUATION.search(text):
        confidence += 0.15
    if DIGIT.search(text):
        confidence += 0.1
    if len(SPECIAL_CHARACTER.findall(text)) > 5:
        confidence += 0.05

    return min(confidence, IMAGE_MAX_CONFIDENCE)


def calculate_document_confidence(text: str | None, file_type: str) -> float:
    """Score text extracted from a document, with a bonus for text-native sources."""
    if _is_short(text):
        return SHORT_TEXT_CONFIDENCE

    confidence = 0.6
    if _word_count(text) > 50:
        confidence += 0.15
    if SENTENCE_PUNCTUATION.search(text):
        confidence += 0.1
    if DIGIT.search(text):
        confidence += 0.05
    if STRUCTURE_MARKER.search(text):
        confidence += 0.05

    if file_type == "application/pdf":
        confidence += 0.1
    if file_type.startswith("text/"):
        confidence += 0.2

    return min(confidence, DOCUMENT_MAX_CONFIDENCE)
