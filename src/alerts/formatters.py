"""Pure functions that render a LogEntry into email content."""

from __future__ import annotations

from html import escape as html_escape

from src.core.types import EmailContent, LogEntry

UNKNOWN_ORIGIN = "unknown"
MISSING_EVENT_TYPE = "N/A"


def _severity_label(entry: LogEntry) -> str:
    return (entry.severity or "unknown").upper()


def format_subject(entry: LogEntry) -> str:
    origin = entry.origin_id or UNKNOWN_ORIGIN
    return f"[{_severity_label(entry)}] Edge Function Alert - {origin[:8]}"


def format_html(entry: LogEntry) -> str:
    """HTML body. Values are escaped so the message shows up as written."""
    rows = [
        "<h2>Supabase Edge Function Alert</h2>",
        f"<p><strong>Level:</strong> {html_escape(_severity_label(entry))}</p>",
        f"<p><strong>Function ID:</strong> {html_escape(entry.origin_id or UNKNOWN_ORIGIN)}</p>",
        f"<p><strong>Event Type:</strong> {html_escape(entry.event_type or MISSING_EVENT_TYPE)}</p>",
        f"<p><strong>Timestamp:</strong> {html_escape(entry.timestamp)}</p>",
        "<p><strong>Message:</strong></p>",
        '<pre style="background: #f4f4f4; padding: 10px; border-radius: 4px; '
        f'overflow-x: auto;">{html_escape(entry.message)}</pre>',
    ]
    return "\n".join(rows)


def format_text(entry: LogEntry) -> str:
    lines = [
        "Supabase Edge Function Alert",
        f"Level: {_severity_label(entry)}",
        f"Function ID: {entry.origin_id or UNKNOWN_ORIGIN}",
        f"Event Type: {entry.event_type or MISSING_EVENT_TYPE}",
        f"Timestamp: {entry.timestamp}",
        f"Message: {entry.message}",
    ]
    return "\n".join(lines)


def format_email(entry: LogEntry) -> EmailContent:
    """Render subject, HTML and plain-text bodies for one entry."""
    return EmailContent(
        subject=format_subject(entry),
        html=format_html(entry),
        text=format_text(entry),
    )
