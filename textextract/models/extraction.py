from sqlalchemy import BigInteger, CheckConstraint, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from textextract.models.base import Base, TimestampMixin, UUIDMixin


class Extraction(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "extractions"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(500), nullable=False)
    file_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    extracted_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    confidence_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    processing_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "confidence_score >= 0.0 AND confidence_score <= 1.0",
            name="ck_extractions_confidence_range",
        ),
        CheckConstraint("processing_time_ms >= 0", name="ck_extractions_processing_time"),
        Index("idx_extractions_user_id", "user_id"),
        Index("idx_extractions_user_created", "user_id", "created_at"),
        Index("idx_extractions_file_type", "file_type"),
    )


class UserAnalytics(UUIDMixin, TimestampMixin, Base):
    """Running totals per user, kept in step with inserts and deletes on extractions."""

    __tablename__ = "user_analytics"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    total_extractions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_files_processed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_text_extracted: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    average_confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
