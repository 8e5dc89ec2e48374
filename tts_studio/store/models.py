"""Pydantic models for batches and segments as served by the studio API."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SegmentStatus(str, Enum):
    UNCHECKED = "UNCHECKED"
    OK = "OK"
    WARNING = "WARNING"
    ERROR = "ERROR"
    DISABLED = "DISABLED"


class AudioSlice(BaseModel):
    """Bounds of a piece of audio in milliseconds.

    ``start < end`` is expected but never enforced: operators may type inverted
    bounds while editing and the store keeps whatever they entered.
    """

    model_config = ConfigDict(extra="allow")

    uid: str
    filename: str = ""
    envelope_path: str = ""
    start: float = 0.0
    end: float = 0.0
    duration: float = 0.0

    @property
    def length(self) -> float:
        return self.end - self.start


class Batch(AudioSlice):
    num: int


class Segment(AudioSlice):
    text: str = ""
    words: Any = None
    batch: str
    num: int
    status: SegmentStatus = Field(default=SegmentStatus.UNCHECKED)

    @field_validator("status", mode="before")
    @classmethod
    def _missing_status(cls, value: Any) -> Any:
        return SegmentStatus.UNCHECKED if value is None else value


__all__ = ["AudioSlice", "Batch", "Segment", "SegmentStatus"]
