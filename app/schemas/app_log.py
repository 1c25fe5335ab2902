from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.app_log import LogLevel


class AppLogCreate(BaseModel):
    level: LogLevel
    message: str = Field(min_length=1, max_length=10000)
    stack_trace: str | dict[str, Any] | None = None
    user_id: str | None = Field(default=None, max_length=200)
    page_path: str | None = Field(default=None, max_length=500)


class AppLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    level: LogLevel
    message: str
    stack_trace: dict[str, Any] | None = None
    user_id: str | None = None
    page_path: str | None = None
    timestamp: datetime


class LogCleanupResult(BaseModel):
    success: bool
    days: int
