"""Trim sizing: how much of one holding to sell to get back to the base value.

All calculations use Decimal arithmetic exclusively -- no float conversions.
Uses round_to_step from exchange/types.py for step rounding (always down).

Sizing flow:
1. excess = amount * price - base_value; nothing to do when excess <= 0
2. raw_quantity = excess / price
3. sell_quantity = floor(raw_quantity / step_size) * step_size
"""

from dataclasses import dataclass
from decimal import Decimal

from portfolio_bot.exchange.types import LotRule, round_to_step
from portfolio_bot.models import Holding, holding_value

_ZERO = Decimal("0")


@dataclass(frozen=True)
class TrimPlan:
    """Sizing result for one holding. sell_quantity is a multiple of the step."""

    excess_value: Decimal
    raw_quantity: Decimal
    sell_quantity: Decimal


def excess_value(holding: Holding, base_value: Decimal) -> Decimal:
    """Value above the base. Negative or zero means nothing to trim."""
    return holding_value(holding) - base_value


def plan_trim(holding: Holding, base_value: Decimal, lot_rule: LotRule) -> TrimPlan:
    """Size the sell for one holding against its lot rule.

    Only the excess above base_value is ever sold, rounded DOWN to the step so
    the remaining value never drops below the base and the quantity never
    exceeds what the exchange will accept.

    Args:
        holding: The holding to trim.
        base_value: Target value per asset in the quote currency.
        lot_rule: Step size for the holding's pair.

    Returns:
        TrimPlan; sell_quantity is zero when there is no excess or the excess
        is smaller than one step.
    """
    if lot_rule.step_size <= 0:
        raise ValueError(f"{lot_rule.pair}: step size must be positive")

    excess = excess_value(holding, base_value)
    if excess <= 0:
        return TrimPlan(excess_value=excess, raw_quantity=_ZERO, sell_quantity=_ZERO)

    # excess > 0 with base_value >= 0 implies price > 0
    raw_quantity = excess / holding.price
    sell_quantity = max(round_to_step(raw_quantity, lot_rule.step_size), _ZERO)
    return TrimPlan(
        excess_value=excess, raw_quantity=raw_quantity, sell_quantity=sell_quantity
    )
