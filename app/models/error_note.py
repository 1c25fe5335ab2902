import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


class ErrorNote(Base):
    """A private service note a user keeps against one system error code."""

    __tablename__ = "error_notes"
    __table_args__ = (
        Index("ix_error_notes_system_code_user", "system_name", "error_code", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    system_name: Mapped[str] = mapped_column(String(160), nullable=False)
    error_code: Mapped[str] = mapped_column(String(80), nullable=False)
    user_id: Mapped[str] = mapped_column(String(200), nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
