"""Concurrent fan-out of notifications with per-entry outcome collection."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from src.alerts.notifier import Notifier
from src.core.types import DeliveryOutcome, DispatchReport, LogEntry

logger = structlog.get_logger(__name__)


async def dispatch_all(notifier: Notifier, entries: Sequence[LogEntry]) -> DispatchReport:
    """Notify for every entry concurrently and wait for all to settle.

    A failing delivery never cancels the others; each one is recorded as a
    DeliveryOutcome in the returned report.
    """
    if not entries:
        return DispatchReport()

    for entry in entries:
        logger.info("alert_queued", log_id=entry.id, origin_id=entry.origin_id)

    results = await asyncio.gather(
        *(notifier.notify(entry) for entry in entries),
        return_exceptions=True,
    )

    outcomes: list[DeliveryOutcome] = []
    for entry, result in zip(entries, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.error(
                "alert_delivery_failed",
                log_id=entry.id,
                error=str(result),
                error_type=type(result).__name__,
            )
            outcomes.append(DeliveryOutcome(entry_id=entry.id, success=False, error=str(result)))
        else:
            outcomes.append(DeliveryOutcome(entry_id=entry.id, success=True, message_id=result))

    report = DispatchReport(outcomes=outcomes)
    logger.info("alerts_dispatched", sent=report.sent, failed=report.failed)
    return report
