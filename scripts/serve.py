#!/usr/bin/env python3
"""Trigger server entrypoint — serves the check endpoint for a scheduler.

Usage::

    # Run with default config
    python scripts/serve.py

    # Custom config file and port
    python scripts/serve.py --config config/settings.yaml --port 9000

    # Override log level
    python scripts/serve.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

import structlog

from src.core.config import load_settings
from src.core.logging import setup_logging
from src.pipeline.orchestrator import create_pipeline
from src.server.app import start_server

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    """Start the trigger server and run until interrupted."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level)

    if not settings.log_source.project_ref:
        logger.error("missing_project_ref")
        print(
            "No log source project configured. Set log_source.project_ref in "
            "config/settings.yaml or SUPABASE_PROJECT_REF.",
            file=sys.stderr,
        )
        return 1

    pipeline = create_pipeline(settings)
    logger.info(
        "relay_starting",
        project_ref=settings.log_source.project_ref,
        recipients=len(settings.email.to_emails),
        origin_filter=len(settings.alerts.allowed_origin_ids),
        lookback_minutes=settings.alerts.check_interval_minutes,
    )

    runner = await start_server(
        pipeline,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
        path=settings.server.path,
    )

    # ── Wait for shutdown signal ─────────────────────────────────
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        await stop_event.wait()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")

    # ── Graceful shutdown ────────────────────────────────────────
    logger.info("relay_shutting_down")
    await runner.cleanup()
    await pipeline.close()
    logger.info("relay_stopped")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Serve the log alert check endpoint.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument("--host", default=None, help="Bind address override")
    parser.add_argument("--port", type=int, default=None, help="Port override")
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
