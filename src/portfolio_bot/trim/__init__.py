"""Auto-trim -- sizing and the sell-the-excess engine."""

from portfolio_bot.trim.engine import AutoTrimEngine, TrimOutcome, TrimReport, TrimStatus
from portfolio_bot.trim.sizing import TrimPlan, excess_value, plan_trim

__all__ = [
    "AutoTrimEngine",
    "TrimOutcome",
    "TrimPlan",
    "TrimReport",
    "TrimStatus",
    "excess_value",
    "plan_trim",
]
