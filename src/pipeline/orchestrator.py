"""Pipeline orchestrator — one fetch → filter → notify check per invocation."""

from __future__ import annotations

from datetime import datetime, timedelta

import structlog

from src.alerts.dispatcher import dispatch_all
from src.alerts.notifier import EmailNotifier, Notifier
from src.core.config import ALERT_SEVERITIES, AlertsConfig, Settings
from src.core.exceptions import DeliveryBatchFailed
from src.core.types import CheckResult
from src.logs.client import LogSourceClient
from src.logs.filters import partition_entries
from src.logs.window import QueryWindow

logger = structlog.get_logger(__name__)


class AlertPipeline:
    """Runs checks against a log source and owns the query window cursor.

    - A fetch failure propagates and leaves the window where it was, so the
      next check covers a wider window.
    - Once the fetch succeeds the window always advances to the end used for
      the fetch, not to the clock after dispatch, so consecutive windows are
      contiguous. This holds even when some deliveries fail.
    - With ``fail_on_delivery_error`` any failed delivery raises
      DeliveryBatchFailed after the advance; otherwise failures are counted.

    Checks must not overlap on the same instance.
    """

    def __init__(
        self,
        source: LogSourceClient,
        notifier: Notifier,
        window: QueryWindow,
        config: AlertsConfig,
    ) -> None:
        self._source = source
        self._notifier = notifier
        self._window = window
        self._config = config

    @property
    def window(self) -> QueryWindow:
        return self._window

    async def run_check(self) -> CheckResult:
        start, end = self._window.current_window()
        with structlog.contextvars.bound_contextvars(check_window_end=end.isoformat()):
            return await self._run(start, end)

    async def _run(self, start: datetime, end: datetime) -> CheckResult:
        logger.info("log_check_started", window_start=start.isoformat())

        entries = await self._source.fetch(start, end, ALERT_SEVERITIES)
        logger.info("logs_fetched", count=len(entries))

        qualifying, _ = partition_entries(entries, self._config)
        report = await dispatch_all(self._notifier, qualifying)

        self._window.advance(end)

        if report.failed and self._config.fail_on_delivery_error:
            raise DeliveryBatchFailed(report)

        result = CheckResult(
            processed=len(entries),
            alerts_sent=report.sent,
            alerts_failed=report.failed,
            window_start=start,
            window_end=end,
        )
        logger.info(
            "log_check_completed",
            processed=result.processed,
            alerts_sent=result.alerts_sent,
            alerts_failed=result.alerts_failed,
        )
        return result

    async def close(self) -> None:
        await self._source.close()
        await self._notifier.close()


def create_pipeline(settings: Settings) -> AlertPipeline:
    """Wire a pipeline from settings, starting the window one interval back."""
    window = QueryWindow.from_lookback(
        timedelta(minutes=settings.alerts.check_interval_minutes)
    )
    return AlertPipeline(
        source=LogSourceClient(settings.log_source),
        notifier=EmailNotifier(settings.email),
        window=window,
        config=settings.alerts,
    )
