import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Enum, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


class AnalyticsEventType(enum.Enum):
    page_view = "page_view"
    error_code_search = "error_code_search"
    button_click = "button_click"
    form_submit = "form_submit"
    device_view = "device_view"
    photo_upload = "photo_upload"
    custom = "custom"


class AnalyticsEvent(Base):
    __tablename__ = "app_analytics"
    __table_args__ = (Index("ix_app_analytics_type_timestamp", "event_type", "timestamp"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_type: Mapped[AnalyticsEventType] = mapped_column(
        Enum(AnalyticsEventType, name="analyticseventtype"), nullable=False
    )
    user_id: Mapped[str | None] = mapped_column(String(200))
    device_id: Mapped[str | None] = mapped_column(String(64))
    path: Mapped[str | None] = mapped_column(String(500))
    meta: Mapped[dict | None] = mapped_column(JSON)
    # Client-generated; set when the event is built, not when it is stored.
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC), index=True
    )
