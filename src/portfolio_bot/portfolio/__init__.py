"""Portfolio valuation -- snapshot building, report lines and alert policy."""

from portfolio_bot.portfolio.report import render_report
from portfolio_bot.portfolio.snapshot import PortfolioSnapshotBuilder
from portfolio_bot.portfolio.threshold import threshold_crossed

__all__ = ["PortfolioSnapshotBuilder", "render_report", "threshold_crossed"]
