from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def split_csv(value: str | None) -> list[str]:
    """Split comma-separated text into trimmed, non-empty segments in order."""
    if not value:
        return []
    return [segment.strip() for segment in value.split(",") if segment.strip()]


class FixStepCreate(BaseModel):
    brand: str | None = Field(default=None, max_length=120)
    model: str | None = Field(default=None, max_length=120)
    error_code: str | None = Field(default=None, max_length=80)
    title: str = Field(default="", max_length=300)
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    media_urls: list[str] = Field(default_factory=list)

    @field_validator("brand", "model", "error_code", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("tags", "media_urls", mode="before")
    @classmethod
    def _split_comma_separated(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return split_csv(value)
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        return value


class FixStepRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    brand: str | None = None
    model: str | None = None
    error_code: str | None = None
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    media_urls: list[str] = Field(default_factory=list)
    created_at: datetime
    created_by: str | None = None

    @field_validator("tags", "media_urls", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or []
