from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ErrorNoteCreate(BaseModel):
    note: str = Field(default="", max_length=10000)


class ErrorNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    note: str
    created_at: datetime
