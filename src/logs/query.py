"""Structured construction of analytics log queries.

The SQL text only ever contains the table identifier and the severity
literals, both validated here. The time window travels separately as
request parameters so no timestamp is spliced into SQL.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import UTC, datetime

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_SEVERITY_RE = re.compile(r"^[a-z]+$")

_COLUMNS = (
    "timestamp",
    "event_message",
    "event_type",
    "metadata.parsed.function_id as function_id",
    "metadata.parsed.level as level",
    "id",
)


def quote_literal(value: str) -> str:
    """Render *value* as a single-quoted SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def _checked_identifier(name: str) -> str:
    if not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid table identifier: {name!r}")
    return name


def _checked_severities(severities: Iterable[str]) -> list[str]:
    levels: list[str] = []
    for sev in severities:
        norm = sev.strip().lower()
        if not _SEVERITY_RE.match(norm):
            raise ValueError(f"Invalid severity token: {sev!r}")
        if norm not in levels:
            levels.append(norm)
    if not levels:
        raise ValueError("At least one severity is required")
    return levels


def build_log_query(table: str, severities: Iterable[str]) -> str:
    """Build the severity-filtered, newest-first query for *table*.

    Raises:
        ValueError: if the table is not a dotted identifier or a severity is
            not a lowercase alphabetic token.
    """
    columns = ",\n  ".join(_COLUMNS)
    levels = ", ".join(quote_literal(s) for s in _checked_severities(severities))
    return (
        f"SELECT\n  {columns}\n"
        f"FROM {_checked_identifier(table)}\n"
        f"WHERE metadata.parsed.level IN ({levels})\n"
        "ORDER BY timestamp DESC"
    )


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_query_params(
    table: str,
    severities: Iterable[str],
    start: datetime,
    end: datetime,
) -> dict[str, str]:
    """Full request parameter set for one windowed query."""
    return {
        "sql": build_log_query(table, severities),
        "iso_timestamp_start": format_timestamp(start),
        "iso_timestamp_end": format_timestamp(end),
    }
