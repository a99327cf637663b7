"""
Optional clean-up pass over extracted text.

Enhancement never fails the caller once the input is valid: service errors
return the original text at 0.7 confidence, refusals and empty answers return
it at 0.8. A successful pass reports a fixed 0.95.
"""

from dataclasses import dataclass

from textextract.config import Settings, settings as default_settings
from textextract.core.exceptions import ValidationError
from textextract.core.logging import get_logger
from textextract.services.llm_service import LLMService
from textextract.services.refusal import is_refusal

logger = get_logger(__name__)

ENHANCED_CONFIDENCE = 0.95
REFUSED_CONFIDENCE = 0.8
FAILED_CONFIDENCE = 0.7

SYSTEM_PROMPT = (
    "You are a text enhancement specialist. Clean up text produced by OCR while preserving "
    "its meaning, structure, and formatting. Fix spelling errors, correct OCR artifacts, and "
    "improve punctuation. Return only the corrected text."
)


@dataclass
class EnhancementResult:
    enhanced_text: str
    confidence: float
    enhanced: bool


class EnhancementService:
    def __init__(self, llm: LLMService, config: Settings | None = None):
        self.llm = llm
        self.config = config or default_settings

    async def enhance(self, text: str, context_hint: str | None = None) -> EnhancementResult:
        if not text or not text.strip():
            raise ValidationError("No text provided for enhancement")

        prompt = (
            "Enhance this text by fixing errors and improving formatting while preserving "
            "the original meaning and structure:\n\n"
        )
        if context_hint:
            prompt = f"Context: {context_hint.strip().splitlines()[0]}\n\n{prompt}"

        try:
            enhanced = await self.llm.chat_completion(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt + text},
                ],
                model=self.config.openai_enhancement_model,
                max_tokens=self.config.openai_max_tokens,
                temperature=0.3,
            )
        except Exception as e:
            logger.warning(f"Enhancement failed, keeping original text: {e}")
            return EnhancementResult(enhanced_text=text, confidence=FAILED_CONFIDENCE, enhanced=False)

        if not enhanced or is_refusal(enhanced):
            logger.warning("Enhancement declined or empty, keeping original text")
            return EnhancementResult(enhanced_text=text, confidence=REFUSED_CONFIDENCE, enhanced=False)

        return EnhancementResult(enhanced_text=enhanced, confidence=ENHANCED_CONFIDENCE, enhanced=True)
