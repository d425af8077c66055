"""Pure alert filtering — severity set plus optional origin allow-list."""

from __future__ import annotations

from collections.abc import Iterable

from src.core.config import ALERT_SEVERITIES, AlertsConfig
from src.core.types import LogEntry


def should_alert(entry: LogEntry, config: AlertsConfig) -> bool:
    """Return True if *entry* warrants a notification under *config*."""
    severity = (entry.severity or "").lower()
    if severity not in ALERT_SEVERITIES:
        return False

    if config.allowed_origin_ids and (entry.origin_id or "") not in config.allowed_origin_ids:
        return False

    return True


def partition_entries(
    entries: Iterable[LogEntry],
    config: AlertsConfig,
) -> tuple[list[LogEntry], list[LogEntry]]:
    """Split entries into ``(qualifying, rejected)``, preserving order."""
    qualifying: list[LogEntry] = []
    rejected: list[LogEntry] = []
    for entry in entries:
        (qualifying if should_alert(entry, config) else rejected).append(entry)
    return qualifying, rejected
