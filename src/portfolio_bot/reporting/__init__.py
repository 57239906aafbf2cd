"""Run reporting -- the append-only text report."""

from portfolio_bot.reporting.report_log import ReportLog

__all__ = ["ReportLog"]
