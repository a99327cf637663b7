from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class PageResult:
    page_number: int
    text: str
    confidence: float


@dataclass
class ExtractionResult:
    text: str
    confidence: float
    extraction_method: str
    processing_time_ms: int = 0
    pages: list[PageResult] = field(default_factory=list)
    used_fallback: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.text or not self.text.strip()


class DocumentExtractor(ABC):
    @abstractmethod
    def extract(self, file_data: bytes, filename: str) -> ExtractionResult:
        """Extract text and a confidence score from a document."""
        ...
