"""Exception hierarchy for the log alerting relay."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.core.types import DispatchReport


class LogAlertError(Exception):
    """Base exception for all relay errors."""


class SourceUnavailable(LogAlertError):
    """The log query failed (transport error or non-2xx response)."""

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class SourceParseError(SourceUnavailable):
    """The log source answered 2xx but the payload was unusable."""


class DeliveryFailed(LogAlertError):
    """A single email notification could not be delivered."""

    def __init__(self, entry_id: str | None, reason: str) -> None:
        super().__init__(f"Failed to deliver alert for log {entry_id or 'unknown'}: {reason}")
        self.entry_id = entry_id
        self.reason = reason


class DeliveryBatchFailed(LogAlertError):
    """One or more notifications in a check failed to deliver."""

    def __init__(self, report: DispatchReport) -> None:
        super().__init__(
            f"{report.failed} of {len(report.outcomes)} alert(s) failed to deliver"
        )
        self.report = report


class InvalidTrigger(LogAlertError):
    """The HTTP trigger used a method other than GET or POST."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Method not allowed: {method}")
        self.method = method
