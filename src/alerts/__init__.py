"""Alert rendering and email delivery."""

from src.alerts.dispatcher import dispatch_all
from src.alerts.formatters import format_email, format_html, format_subject, format_text
from src.alerts.notifier import EmailNotifier, Notifier, create_ses_client

__all__ = [
    "EmailNotifier",
    "Notifier",
    "create_ses_client",
    "dispatch_all",
    "format_email",
    "format_html",
    "format_subject",
    "format_text",
]
