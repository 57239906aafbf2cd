"""Shared data models for the portfolio monitor.

CRITICAL: All monetary values use Decimal. Never use float for prices or quantities.
Holdings and snapshots are plain frozen records; values are derived by the
pure functions below, never by hidden properties.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class OrderSide(str, Enum):
    """Order direction."""

    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    """Order type."""

    MARKET = "MARKET"
    LIMIT = "LIMIT"


@dataclass(frozen=True)
class Holding:
    """One asset's balance and unit price within a snapshot."""

    asset: str
    pair: str
    amount: Decimal
    price: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Negative amount for {self.asset}: {self.amount}")
        if self.price < 0:
            raise ValueError(f"Negative price for {self.pair}: {self.price}")


def holding_value(holding: Holding) -> Decimal:
    """Return amount * price for a holding."""
    return holding.amount * holding.price


def total_value(holdings: Iterable[Holding]) -> Decimal:
    """Sum of holding values. Decimal("0") for an empty portfolio."""
    return sum((holding_value(h) for h in holdings), Decimal("0"))


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Valued holdings in configured asset order. Built fresh every run."""

    holdings: tuple[Holding, ...]
    total_value: Decimal


def snapshot_from_holdings(holdings: Iterable[Holding]) -> PortfolioSnapshot:
    """Freeze holdings into a snapshot with its total computed once."""
    items = tuple(holdings)
    return PortfolioSnapshot(holdings=items, total_value=total_value(items))


@dataclass(frozen=True)
class OrderRequest:
    """Request to place an order."""

    pair: str
    side: OrderSide
    order_type: OrderType
    quantity: Decimal


@dataclass
class OrderResult:
    """Submission acknowledgement. Fills are not polled."""

    order_id: str
    pair: str
    side: OrderSide
    quantity: Decimal
    timestamp: float
    is_simulated: bool = False
    raw: dict = field(default_factory=dict)
