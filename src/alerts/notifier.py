"""Notification delivery — one email per qualifying log entry via Amazon SES."""

from __future__ import annotations

import abc
import asyncio
from typing import Any

import boto3
import structlog
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from src.alerts.formatters import format_email
from src.core.config import EmailConfig
from src.core.exceptions import DeliveryFailed
from src.core.types import EmailContent, LogEntry

logger = structlog.get_logger(__name__)

_CHARSET = "UTF-8"


class Notifier(abc.ABC):
    """Base class for alert delivery."""

    @abc.abstractmethod
    async def notify(self, entry: LogEntry) -> str | None:
        """Deliver one alert. Returns a provider message id if available.

        Raises:
            DeliveryFailed: when the transport reports an error.
        """

    async def close(self) -> None:
        """Release resources."""


def create_ses_client(config: EmailConfig) -> Any:
    """Build a boto3 SES v2 client from *config*.

    Empty credentials fall through to boto3's default credential chain.
    Retries are disabled; a failed send is reported, not repeated.
    """
    secret = config.secret_access_key.get_secret_value()
    return boto3.client(
        "sesv2",
        region_name=config.region,
        aws_access_key_id=config.access_key_id or None,
        aws_secret_access_key=secret or None,
        config=BotoConfig(
            connect_timeout=config.timeout_secs,
            read_timeout=config.timeout_secs,
            retries={"total_max_attempts": 1},
        ),
    )


class EmailNotifier(Notifier):
    """Sends a dual-format (HTML + text) email to all recipients at once."""

    def __init__(self, config: EmailConfig, client: Any | None = None) -> None:
        self._config = config
        self._client = client

    def _get_client(self) -> Any:
        # boto3 client creation is not thread-safe; only call from the event loop.
        if self._client is None:
            self._client = create_ses_client(self._config)
        return self._client

    def build_request(self, content: EmailContent) -> dict[str, Any]:
        """Keyword arguments for ``SESV2.Client.send_email``."""
        return {
            "FromEmailAddress": self._config.from_email,
            "Destination": {"ToAddresses": list(self._config.to_emails)},
            "Content": {
                "Simple": {
                    "Subject": {"Data": content.subject, "Charset": _CHARSET},
                    "Body": {
                        "Html": {"Data": content.html, "Charset": _CHARSET},
                        "Text": {"Data": content.text, "Charset": _CHARSET},
                    },
                },
            },
        }

    @staticmethod
    def _send(client: Any, request: dict[str, Any]) -> str | None:
        response = client.send_email(**request)
        return response.get("MessageId")

    async def notify(self, entry: LogEntry) -> str | None:
        request = self.build_request(format_email(entry))
        try:
            client = self._get_client()
            message_id = await asyncio.to_thread(self._send, client, request)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            reason = f"{error.get('Code', 'ClientError')}: {error.get('Message', '')}"
            raise DeliveryFailed(entry.id, reason) from exc
        except BotoCoreError as exc:
            raise DeliveryFailed(entry.id, str(exc)) from exc

        logger.info(
            "alert_sent",
            log_id=entry.id,
            message_id=message_id,
            recipients=len(self._config.to_emails),
        )
        return message_id
