"""Plain-text portfolio report lines."""

from decimal import ROUND_HALF_UP, Decimal

from portfolio_bot.exchange.types import format_quantity
from portfolio_bot.models import PortfolioSnapshot, holding_value

_CENTS = Decimal("0.01")


def format_usd(value: Decimal) -> str:
    return f"${value.quantize(_CENTS, rounding=ROUND_HALF_UP)}"


def render_report(snapshot: PortfolioSnapshot) -> list[str]:
    """One "ASSET: amount x $price = $value" line per holding plus the total."""
    lines = [
        f"{h.asset}: {format_quantity(h.amount)} x {format_usd(h.price)} "
        f"= {format_usd(holding_value(h))}"
        for h in snapshot.holdings
    ]
    lines.append(f"Total: {format_usd(snapshot.total_value)}")
    return lines
