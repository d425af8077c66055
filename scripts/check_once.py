#!/usr/bin/env python3
"""Run a single log check and print the JSON summary.

Intended for cron jobs that do not go through the HTTP trigger. The query
window is the configured lookback, since nothing persists between runs.

Usage::

    python scripts/check_once.py --config config/settings.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import structlog

from src.core.config import load_settings
from src.core.logging import setup_logging
from src.pipeline.orchestrator import create_pipeline

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(level=args.log_level)

    pipeline = create_pipeline(settings)
    try:
        result = await pipeline.run_check()
    except Exception as exc:
        logger.exception("log_check_failed", error_type=type(exc).__name__)
        print(json.dumps({"success": False, "error": str(exc) or type(exc).__name__}))
        return 1
    finally:
        await pipeline.close()

    print(json.dumps({
        "success": True,
        "message": "Log check completed",
        "processed": result.processed,
        "alerts_sent": result.alerts_sent,
        "alerts_failed": result.alerts_failed,
    }))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one log alert check.")
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
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
