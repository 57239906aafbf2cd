"""Builders for domain objects used across the test suite."""

from decimal import Decimal

from portfolio_bot.models import Holding


def make_holding(
    asset: str = "AVAX",
    amount: str = "10",
    price: str = "80",
    quote: str = "USDT",
) -> Holding:
    """Create a Holding from string amounts."""
    return Holding(
        asset=asset,
        pair=f"{asset}{quote}",
        amount=Decimal(amount),
        price=Decimal(price),
    )
