"""Core module — config, types, exceptions, logging."""

from src.core.config import Settings, get_settings, load_settings, reset_settings
from src.core.exceptions import (
    DeliveryBatchFailed,
    DeliveryFailed,
    InvalidTrigger,
    LogAlertError,
    SourceParseError,
    SourceUnavailable,
)
from src.core.logging import setup_logging
from src.core.types import (
    CheckResult,
    DeliveryOutcome,
    DispatchReport,
    EmailContent,
    LogEntry,
)

__all__ = [
    "CheckResult",
    "DeliveryBatchFailed",
    "DeliveryFailed",
    "DeliveryOutcome",
    "DispatchReport",
    "EmailContent",
    "InvalidTrigger",
    "LogAlertError",
    "LogEntry",
    "Settings",
    "SourceParseError",
    "SourceUnavailable",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
