from textextract.models.base import Base
from textextract.models.extraction import Extraction, UserAnalytics
from textextract.models.user_settings import UserSettings

__all__ = [
    "Base",
    "Extraction",
    "UserAnalytics",
    "UserSettings",
]
