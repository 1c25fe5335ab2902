from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.analytics import AnalyticsEventType


class AnalyticsEventCreate(BaseModel):
    event_type: AnalyticsEventType
    user_id: str | None = Field(default=None, max_length=200)
    path: str | None = Field(default=None, max_length=500)
    meta: dict[str, Any] | None = None


class AnalyticsEventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    event_type: AnalyticsEventType
    user_id: str | None = None
    device_id: str | None = None
    path: str | None = None
    meta: dict[str, Any] | None = None
    timestamp: datetime


class ErrorCodeSearchCount(BaseModel):
    code: str
    system: str
    count: int


class PageViewCount(BaseModel):
    path: str
    count: int


class TrackAccepted(BaseModel):
    accepted: bool = True
    device_id: str
