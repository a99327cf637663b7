from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from textextract.models.base import Base, TimestampMixin, UUIDMixin


class UserSettings(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_settings"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    theme: Mapped[str] = mapped_column(String(20), nullable=False, default="system")
    openai_api_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
