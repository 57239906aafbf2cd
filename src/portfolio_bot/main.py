"""Entry point for the portfolio monitor.

Runs exactly one cycle and exits: 0 on success, 1 on any top-level failure.
Scheduling is left to cron or a task scheduler.

Component wiring order (in _build_components):
1. ServerClock (synced at the start of the cycle)
2. ExchangeClient (MexcClient)
3. Notifier (TelegramNotifier, or NullNotifier when not configured)
4. PortfolioSnapshotBuilder
5. Executor (PaperExecutor or LiveExecutor based on TRIM_MODE)
6. AutoTrimEngine (only when TRIM_ENABLED)
7. PortfolioMonitor

On failure the error is redacted, sent to the operator best-effort, written
to the report log, and the process exits non-zero. If reporting the failure
fails too, the secondary error goes to stderr.
"""

import asyncio
import sys
import traceback
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import structlog
from pydantic import ValidationError

from portfolio_bot.config import AppSettings
from portfolio_bot.exchange.clock import ServerClock
from portfolio_bot.exchange.mexc_client import MexcClient
from portfolio_bot.execution.executor import Executor
from portfolio_bot.logging import get_logger, setup_logging
from portfolio_bot.monitor import PortfolioMonitor
from portfolio_bot.notifications.base import Notifier, NullNotifier, best_effort
from portfolio_bot.notifications.formatting import format_error_alert
from portfolio_bot.notifications.redaction import Redactor
from portfolio_bot.notifications.telegram import TelegramNotifier
from portfolio_bot.portfolio.snapshot import PortfolioSnapshotBuilder
from portfolio_bot.reporting.report_log import ReportLog
from portfolio_bot.trim.engine import AutoTrimEngine

SUCCESS_LINE = "Portfolio tracker script completed successfully"


def _build_components(
    settings: AppSettings, report_log: ReportLog, redactor: Redactor
) -> dict[str, Any]:
    """Build all components from settings.

    Nothing here touches the network; the clock is synced by the monitor.

    Returns:
        Dict mapping component names to instances.
    """
    logger = get_logger("portfolio_bot.main")

    clock = ServerClock()
    exchange_client = MexcClient(settings.exchange, clock)

    notifier: Notifier
    if settings.telegram.configured:
        notifier = TelegramNotifier(settings.telegram)
    else:
        logger.warning("telegram_not_configured", note="Reports go to the log only.")
        notifier = NullNotifier()

    snapshot_builder = PortfolioSnapshotBuilder(exchange_client)

    trim_engine = None
    if settings.trim.enabled:
        executor: Executor
        if settings.trim.mode == "live":
            from portfolio_bot.execution.live_executor import LiveExecutor

            executor = LiveExecutor(exchange_client)
        else:
            from portfolio_bot.execution.paper_executor import PaperExecutor

            executor = PaperExecutor()

        trim_engine = AutoTrimEngine(
            exchange_client=exchange_client,
            executor=executor,
            notifier=notifier,
            report_log=report_log,
            base_value=settings.portfolio.base_value_per_asset,
            redact=redactor,
        )
        logger.info(
            "auto_trim_enabled",
            mode=settings.trim.mode,
            base_value=str(settings.portfolio.base_value_per_asset),
        )

    monitor = PortfolioMonitor(
        settings=settings,
        exchange_client=exchange_client,
        clock=clock,
        snapshot_builder=snapshot_builder,
        notifier=notifier,
        report_log=report_log,
        trim_engine=trim_engine,
    )

    return {
        "clock": clock,
        "exchange_client": exchange_client,
        "notifier": notifier,
        "snapshot_builder": snapshot_builder,
        "trim_engine": trim_engine,
        "monitor": monitor,
    }


async def report_failure(
    exc: BaseException, notifier: Notifier, report_log: ReportLog, redactor: Redactor
) -> None:
    """Send and persist a redacted error report for a failed run."""
    logger = get_logger("portfolio_bot.main")
    now = datetime.now(timezone.utc)

    await best_effort(
        notifier.send(format_error_alert(exc, redactor, now=now)),
        what="error_alert",
        redact=redactor,
    )

    message = redactor(str(exc))
    logger.error("run_failed", error_type=type(exc).__name__, error=message)
    trace = redactor("".join(traceback.format_exception(exc)))
    report_log.log([f"[{now.isoformat()}] {type(exc).__name__}: {message}", *trace.splitlines()])


async def run(settings: AppSettings | None = None) -> int:
    """Run one monitoring cycle and return the process exit code."""
    if settings is None:
        try:
            settings = AppSettings()
        except ValidationError as exc:
            print(f"portfolio tracker: invalid configuration: {exc}", file=sys.stderr)
            return 1

    setup_logging(settings.log_level, settings.log_format)
    structlog.contextvars.bind_contextvars(run_id=uuid4().hex[:8])
    logger = get_logger("portfolio_bot.main")

    report_log = ReportLog(settings.report_file)
    redactor = Redactor.from_settings(settings)
    components = _build_components(settings, report_log, redactor)
    exchange_client = components["exchange_client"]
    notifier = components["notifier"]

    logger.info(
        "portfolio_run_started",
        assets=list(settings.portfolio.assets),
        threshold=str(settings.portfolio.alert_threshold),
        direction=settings.portfolio.alert_direction,
        report_file=str(report_log.path) if report_log.path else None,
    )

    try:
        async with exchange_client:
            if not settings.portfolio.assets:
                raise ValueError("No assets configured (PORTFOLIO_ASSETS is empty)")
            await components["monitor"].run_once()
        report_log.log(SUCCESS_LINE)
        return 0
    except Exception as exc:
        try:
            await report_failure(exc, notifier, report_log, redactor)
        except Exception as secondary:
            print(
                "portfolio tracker script encountered an unreported error:",
                redactor(repr(secondary)),
                file=sys.stderr,
            )
        return 1
    finally:
        await notifier.close()
        logger.info("portfolio_run_finished")


def main() -> None:
    """Synchronous entry point."""
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
