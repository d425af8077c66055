"""Tests for LogSourceClient — request shape, parsing, failure modes."""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest
from pydantic import SecretStr

from src.core.config import LogSourceConfig
from src.core.exceptions import SourceParseError, SourceUnavailable
from src.logs.client import LogSourceClient, _parse_entries

START = datetime(2024, 5, 1, 11, 45, tzinfo=UTC)
END = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
LEVELS = ("error", "fatal", "panic")


def _cfg(**kw: object) -> LogSourceConfig:
    defaults: dict[str, object] = {
        "api_base": "https://api.test.local",
        "project_ref": "proj123",
        "access_token": SecretStr("sbp_test"),
    }
    defaults.update(kw)
    return LogSourceConfig(**defaults)  # type: ignore[arg-type]


def _client(handler: object, **kw: object) -> LogSourceClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))  # type: ignore[arg-type]
    return LogSourceClient(_cfg(**kw), http=http)


def _row(**kw: object) -> dict[str, object]:
    row: dict[str, object] = {
        "timestamp": "2024-05-01T11:59:00Z",
        "event_message": "boom",
        "event_type": "Log",
        "function_id": "abc12345-fn",
        "level": "error",
        "id": "log-1",
    }
    row.update(kw)
    return row


# ── _parse_entries ──────────────────────────────────────────────


class TestParseEntries:
    def test_rows_parsed(self) -> None:
        entries = _parse_entries({"result": [_row(), _row(id="log-2", level="fatal")]})
        assert [e.id for e in entries] == ["log-1", "log-2"]
        assert entries[1].severity == "fatal"

    def test_missing_result_is_empty(self) -> None:
        assert _parse_entries({}) == []
        assert _parse_entries({"result": None}) == []

    def test_non_dict_rows_skipped(self) -> None:
        assert len(_parse_entries({"result": [_row(), "junk", 3]})) == 1

    def test_non_list_result_raises(self) -> None:
        with pytest.raises(SourceParseError):
            _parse_entries({"result": "nope"})

    def test_non_object_payload_raises(self) -> None:
        with pytest.raises(SourceParseError):
            _parse_entries([_row()])

    def test_error_field_raises(self) -> None:
        with pytest.raises(SourceParseError, match="bad sql"):
            _parse_entries({"result": [], "error": "bad sql"})


# ── fetch ───────────────────────────────────────────────────────


class TestFetch:
    async def test_request_shape(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"result": [_row()]})

        client = _client(handler)
        entries = await client.fetch(START, END, LEVELS)
        await client.close()

        assert len(entries) == 1
        req = seen[0]
        assert req.method == "GET"
        assert req.url.path == "/v1/projects/proj123/analytics/endpoints/logs.all"
        assert req.headers["Authorization"] == "Bearer sbp_test"
        assert req.url.params["iso_timestamp_start"] == "2024-05-01T11:45:00.000Z"
        assert req.url.params["iso_timestamp_end"] == "2024-05-01T12:00:00.000Z"
        sql = req.url.params["sql"]
        assert "FROM edge_logs" in sql
        assert "IN ('error', 'fatal', 'panic')" in sql

    async def test_params_are_url_encoded(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"result": []})

        client = _client(handler)
        await client.fetch(START, END, LEVELS)
        raw_query = seen[0].url.query.decode()
        assert " " not in raw_query
        assert "\n" not in raw_query

    async def test_non_2xx_raises_with_status_and_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="unauthorized")

        client = _client(handler)
        with pytest.raises(SourceUnavailable) as excinfo:
            await client.fetch(START, END, LEVELS)
        assert excinfo.value.status == 401
        assert excinfo.value.body == "unauthorized"
        assert "401" in str(excinfo.value)

    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)
        with pytest.raises(SourceUnavailable) as excinfo:
            await client.fetch(START, END, LEVELS)
        assert excinfo.value.status is None

    async def test_invalid_json_raises_parse_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        client = _client(handler)
        with pytest.raises(SourceParseError):
            await client.fetch(START, END, LEVELS)

    def test_parse_error_is_source_unavailable(self) -> None:
        assert issubclass(SourceParseError, SourceUnavailable)

    async def test_custom_table(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"result": []})

        client = _client(handler, table="function_logs")
        await client.fetch(START, END, LEVELS)
        assert "FROM function_logs" in seen[0].url.params["sql"]


# ── Lifecycle ───────────────────────────────────────────────────


class TestLifecycle:
    async def test_lazy_client_uses_configured_timeout(self) -> None:
        client = LogSourceClient(_cfg(timeout_secs=3.5))
        http = client._get_client()
        assert http.timeout == httpx.Timeout(3.5)
        assert client.connected
        await client.close()
        assert not client.connected

    async def test_context_manager_closes(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"result": []})

        async with _client(handler) as client:
            await client.fetch(START, END, LEVELS)
            assert client.connected
        assert not client.connected

    def test_endpoint_strips_trailing_slash(self) -> None:
        client = LogSourceClient(_cfg(api_base="https://api.test.local/"))
        assert client.endpoint == (
            "https://api.test.local/v1/projects/proj123/analytics/endpoints/logs.all"
        )
