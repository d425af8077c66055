"""Shared Pydantic models for the fetch → filter → notify pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogEntry(BaseModel):
    """One row returned by the log source.

    Built from the analytics API's column names (``event_message``,
    ``function_id``, ``level``); exposed under domain names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    timestamp: str = ""
    message: str = Field(default="", alias="event_message")
    event_type: str | None = None
    origin_id: str | None = Field(default=None, alias="function_id")
    severity: str | None = Field(default=None, alias="level")
    id: str | None = None

    @field_validator("timestamp", "message", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("timestamp", "message", "event_type", "origin_id", "severity", "id", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)


class EmailContent(BaseModel):
    """Rendered notification — subject plus HTML and plain-text bodies."""

    subject: str
    html: str
    text: str


class DeliveryOutcome(BaseModel):
    """Result of one notification attempt."""

    entry_id: str | None = None
    success: bool
    message_id: str | None = None
    error: str | None = None


class DispatchReport(BaseModel):
    """Aggregated outcomes of one concurrent notification batch."""

    outcomes: list[DeliveryOutcome] = Field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)


class CheckResult(BaseModel):
    """Summary of one completed check."""

    processed: int
    alerts_sent: int
    alerts_failed: int = 0
    window_start: datetime
    window_end: datetime
