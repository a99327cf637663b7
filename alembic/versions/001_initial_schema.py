"""Initial schema - extractions, user analytics, user settings

Revision ID: 001
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "extractions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("file_name", sa.String(500), nullable=False),
        sa.Column("file_type", sa.String(255), nullable=False),
        sa.Column("file_size_bytes", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("extracted_text", sa.Text, nullable=False, server_default=""),
        sa.Column("confidence_score", sa.Float, nullable=False, server_default="0"),
        sa.Column("processing_time_ms", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "confidence_score >= 0.0 AND confidence_score <= 1.0",
            name="ck_extractions_confidence_range",
        ),
        sa.CheckConstraint("processing_time_ms >= 0", name="ck_extractions_processing_time"),
    )
    op.create_index("idx_extractions_user_id", "extractions", ["user_id"])
    op.create_index("idx_extractions_user_created", "extractions", ["user_id", "created_at"])
    op.create_index("idx_extractions_file_type", "extractions", ["file_type"])

    # One row per user, maintained by the application alongside extraction writes
    op.create_table(
        "user_analytics",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False, unique=True),
        sa.Column("total_extractions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_files_processed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_text_extracted", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("average_confidence", sa.Float, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "user_settings",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("theme", sa.String(20), nullable=False, server_default="system"),
        sa.Column("openai_api_key", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_settings_user_id", "user_settings", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_user_settings_user_id", table_name="user_settings")
    op.drop_table("user_settings")
    op.drop_table("user_analytics")
    op.drop_table("extractions")
