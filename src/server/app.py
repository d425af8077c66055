"""HTTP trigger — runs one check per request for an external scheduler.

Runs as an ``aiohttp`` web server with a single route:
- ``GET|POST <path>`` → run a check, JSON summary
- any other method    → 405
"""

from __future__ import annotations

import structlog
from aiohttp import web

from src.core.exceptions import InvalidTrigger
from src.pipeline.orchestrator import AlertPipeline

logger = structlog.get_logger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST"})

PIPELINE_KEY = web.AppKey("pipeline", AlertPipeline)


def _check_method(request: web.Request) -> None:
    if request.method not in ALLOWED_METHODS:
        raise InvalidTrigger(request.method)


async def _handle_check(request: web.Request) -> web.Response:
    try:
        _check_method(request)
    except InvalidTrigger as exc:
        logger.warning("trigger_rejected", method=exc.method)
        return web.Response(
            status=405,
            text="Method not allowed",
            headers={"Allow": ", ".join(sorted(ALLOWED_METHODS))},
        )

    pipeline = request.app[PIPELINE_KEY]
    try:
        result = await pipeline.run_check()
    except Exception as exc:
        logger.exception("log_check_failed", error_type=type(exc).__name__)
        return web.json_response(
            {"success": False, "error": str(exc) or type(exc).__name__},
            status=500,
        )

    return web.json_response({
        "success": True,
        "message": "Log check completed",
        "processed": result.processed,
        "alerts_sent": result.alerts_sent,
        "alerts_failed": result.alerts_failed,
    })


def create_app(pipeline: AlertPipeline, path: str = "/") -> web.Application:
    """Create the aiohttp web application."""
    app = web.Application()
    app[PIPELINE_KEY] = pipeline
    app.router.add_route("*", path, _handle_check)
    return app


async def start_server(
    pipeline: AlertPipeline,
    host: str = "0.0.0.0",
    port: int = 8000,
    path: str = "/",
) -> web.AppRunner:
    """Start the trigger server. Returns the runner for cleanup."""
    app = create_app(pipeline, path=path)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("trigger_server_started", host=host, port=port, path=path)
    return runner
