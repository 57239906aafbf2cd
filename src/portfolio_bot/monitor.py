"""Portfolio monitor -- one evaluation cycle from clock sync to trim.

Each run:
  1. SYNC: one server-time sync; every signed request after uses the offset
  2. SNAPSHOT: balances + prices for the configured assets (fails fast)
  3. REPORT: per-asset lines + total to the report log and the operator
  4. ALERT: compare the total to the threshold in the configured direction
  5. TRIM: when enabled and the alert fired, run the auto-trim engine and
     wait for it to finish before the cycle ends

Fatal errors propagate to main(), which reports them and sets the exit code.
"""

from __future__ import annotations

from dataclasses import dataclass

from portfolio_bot.config import AppSettings
from portfolio_bot.exchange.client import ExchangeClient
from portfolio_bot.exchange.clock import ServerClock
from portfolio_bot.logging import get_logger
from portfolio_bot.models import PortfolioSnapshot
from portfolio_bot.notifications.base import Notifier, best_effort
from portfolio_bot.notifications.formatting import format_alert_message, format_report_message
from portfolio_bot.portfolio.report import render_report
from portfolio_bot.portfolio.snapshot import PortfolioSnapshotBuilder
from portfolio_bot.portfolio.threshold import threshold_crossed
from portfolio_bot.reporting.report_log import ReportLog
from portfolio_bot.trim.engine import AutoTrimEngine, TrimReport

logger = get_logger(__name__)

_ALERT_TEXT = {
    "at_or_above": "Total value exceeds threshold!",
    "below": "Total value is below threshold!",
}


@dataclass
class CycleResult:
    """What one run produced."""

    snapshot: PortfolioSnapshot
    alert_triggered: bool
    trim_report: TrimReport | None = None


class PortfolioMonitor:
    """Runs one monitoring cycle.

    Args:
        settings: Application-wide settings.
        exchange_client: Exchange API client (also the server-time source).
        clock: Clock synced at the start of the cycle.
        snapshot_builder: Builds the valued portfolio.
        notifier: Operator channel.
        report_log: Persistent text report.
        trim_engine: Auto-trim engine, or None when trimming is disabled.
    """

    def __init__(
        self,
        settings: AppSettings,
        exchange_client: ExchangeClient,
        clock: ServerClock,
        snapshot_builder: PortfolioSnapshotBuilder,
        notifier: Notifier,
        report_log: ReportLog,
        trim_engine: AutoTrimEngine | None = None,
    ) -> None:
        self._settings = settings
        self._exchange_client = exchange_client
        self._clock = clock
        self._snapshot_builder = snapshot_builder
        self._notifier = notifier
        self._report_log = report_log
        self._trim_engine = trim_engine

    async def run_once(self) -> CycleResult:
        """Run one cycle to completion.

        Raises:
            Exception: Clock sync or snapshot failures, unchanged.
        """
        portfolio = self._settings.portfolio

        await self._clock.sync(self._exchange_client)

        snapshot = await self._snapshot_builder.build(list(portfolio.assets))

        lines = render_report(snapshot)
        self._report_log.log(lines)
        await best_effort(
            self._notifier.send(format_report_message(lines)), what="portfolio_report"
        )

        triggered = threshold_crossed(
            snapshot.total_value, portfolio.alert_threshold, portfolio.alert_direction
        )
        result = CycleResult(snapshot=snapshot, alert_triggered=triggered)

        if not triggered:
            logger.info(
                "alert_not_triggered",
                total_value=str(snapshot.total_value),
                threshold=str(portfolio.alert_threshold),
                direction=portfolio.alert_direction,
            )
            return result

        alert = _ALERT_TEXT[portfolio.alert_direction]
        logger.warning(
            "alert_triggered",
            total_value=str(snapshot.total_value),
            threshold=str(portfolio.alert_threshold),
            direction=portfolio.alert_direction,
        )
        self._report_log.log(alert)
        await best_effort(self._notifier.send(format_alert_message(alert)), what="portfolio_alert")

        if self._trim_engine is None:
            logger.info("auto_trim_disabled")
            return result

        result.trim_report = await self._trim_engine.trim(snapshot)
        return result
