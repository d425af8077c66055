"""Tests for the HTTP trigger — method gate, success and failure bodies."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

from aiohttp import test_utils

from src.core.exceptions import (
    DeliveryBatchFailed,
    SourceUnavailable,
)
from src.core.types import CheckResult, DeliveryOutcome, DispatchReport
from src.pipeline.orchestrator import AlertPipeline
from src.server.app import create_app

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _pipeline(result: CheckResult | None = None, error: Exception | None = None) -> MagicMock:
    pipeline = MagicMock(spec=AlertPipeline)
    if error is not None:
        pipeline.run_check = AsyncMock(side_effect=error)
    else:
        pipeline.run_check = AsyncMock(return_value=result or CheckResult(
            processed=3, alerts_sent=2, window_start=T0, window_end=T0,
        ))
    return pipeline


def _serve(pipeline: MagicMock, **kw: str) -> test_utils.TestClient:
    return test_utils.TestClient(test_utils.TestServer(create_app(pipeline, **kw)))


class TestTrigger:
    async def test_post_runs_check(self) -> None:
        pipeline = _pipeline()
        async with _serve(pipeline) as client:
            resp = await client.post("/")
            body = await resp.json()

        assert resp.status == 200
        assert body == {
            "success": True,
            "message": "Log check completed",
            "processed": 3,
            "alerts_sent": 2,
            "alerts_failed": 0,
        }
        pipeline.run_check.assert_awaited_once()

    async def test_get_runs_check(self) -> None:
        pipeline = _pipeline()
        async with _serve(pipeline) as client:
            resp = await client.get("/")
        assert resp.status == 200
        pipeline.run_check.assert_awaited_once()

    async def test_other_methods_rejected(self) -> None:
        pipeline = _pipeline()
        async with _serve(pipeline) as client:
            for method in ("PUT", "DELETE", "PATCH"):
                resp = await client.request(method, "/")
                assert resp.status == 405
                assert resp.headers["Allow"] == "GET, POST"
        pipeline.run_check.assert_not_awaited()

    async def test_source_failure_returns_500(self) -> None:
        pipeline = _pipeline(error=SourceUnavailable("Failed to fetch logs: 503 down", status=503))
        async with _serve(pipeline) as client:
            resp = await client.post("/")
            body = await resp.json()

        assert resp.status == 500
        assert body == {"success": False, "error": "Failed to fetch logs: 503 down"}

    async def test_delivery_failure_returns_500(self) -> None:
        report = DispatchReport(outcomes=[
            DeliveryOutcome(entry_id="1", success=True),
            DeliveryOutcome(entry_id="2", success=False, error="rejected"),
        ])
        pipeline = _pipeline(error=DeliveryBatchFailed(report))
        async with _serve(pipeline) as client:
            resp = await client.post("/")
            body = await resp.json()

        assert resp.status == 500
        assert body["success"] is False
        assert "1 of 2" in body["error"]

    async def test_unexpected_error_returns_500(self) -> None:
        pipeline = _pipeline(error=RuntimeError())
        async with _serve(pipeline) as client:
            resp = await client.post("/")
            body = await resp.json()

        assert resp.status == 500
        assert body == {"success": False, "error": "RuntimeError"}

    async def test_custom_path(self) -> None:
        pipeline = _pipeline()
        async with _serve(pipeline, path="/log-alerts") as client:
            ok = await client.post("/log-alerts")
            missing = await client.post("/")
        assert ok.status == 200
        assert missing.status == 404
