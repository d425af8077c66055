"""Log source client — windowed queries against the Supabase analytics API."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from types import TracebackType

import httpx
import structlog
from pydantic import ValidationError

from src.core.config import LogSourceConfig
from src.core.exceptions import SourceParseError, SourceUnavailable
from src.core.types import LogEntry
from src.logs.query import build_query_params

logger = structlog.stdlib.get_logger()


def _parse_entries(body: object) -> list[LogEntry]:
    """Convert a ``{"result": [...]}`` payload into LogEntry objects.

    A missing or null ``result`` means no rows. Rows that are not objects
    are skipped.
    """
    if not isinstance(body, dict):
        raise SourceParseError("Log source returned a non-object payload")

    if body.get("error"):
        raise SourceParseError(f"Log source reported an error: {body['error']}")

    rows = body.get("result")
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise SourceParseError("Log source 'result' is not a list")

    entries: list[LogEntry] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            entries.append(LogEntry.model_validate(row))
        except ValidationError as exc:
            raise SourceParseError(f"Malformed log row: {exc}") from exc
    return entries


class LogSourceClient:
    """Fetches structured log rows for a time window and severity set.

    Usage::

        async with LogSourceClient(settings.log_source) as source:
            entries = await source.fetch(start, end, ["error", "fatal"])
    """

    def __init__(
        self,
        config: LogSourceConfig,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._http = http

    @property
    def endpoint(self) -> str:
        base = self._config.api_base.rstrip("/")
        return f"{base}/v1/projects/{self._config.project_ref}/analytics/endpoints/logs.all"

    @property
    def connected(self) -> bool:
        return self._http is not None and not self._http.is_closed

    def _get_client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self._config.timeout_secs))
        return self._http

    async def fetch(
        self,
        start: datetime,
        end: datetime,
        severities: Iterable[str],
    ) -> list[LogEntry]:
        """Return entries logged in the window, newest first.

        Raises:
            SourceUnavailable: on transport failure or a non-2xx status.
            SourceParseError: if the payload cannot be interpreted.
        """
        params = build_query_params(self._config.table, severities, start, end)
        headers = {
            "Authorization": f"Bearer {self._config.access_token.get_secret_value()}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._get_client().get(
                self.endpoint, params=params, headers=headers
            )
        except httpx.HTTPError as exc:
            raise SourceUnavailable(f"Failed to fetch logs: {exc}") from exc

        if not response.is_success:
            body = response.text
            logger.warning(
                "log_source_non_success",
                status=response.status_code,
                body=body[:200],
            )
            raise SourceUnavailable(
                f"Failed to fetch logs: {response.status_code} {body}",
                status=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceParseError(
                "Log source returned invalid JSON",
                status=response.status_code,
                body=response.text,
            ) from exc

        entries = _parse_entries(payload)
        logger.debug("log_source_fetched", count=len(entries))
        return entries

    async def close(self) -> None:
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    async def __aenter__(self) -> LogSourceClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
