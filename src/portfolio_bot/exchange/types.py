"""Exchange-specific type definitions and utility functions.

All monetary values use Decimal. Never use float for prices, quantities, or fees.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LotRule:
    """Quantity granularity for one trading pair.

    Fetched from the exchange trading rules right before sizing an order.
    Not cached across pairs.
    """

    pair: str
    step_size: Decimal
    min_qty: Decimal


def round_to_step(value: Decimal, step: Decimal) -> Decimal:
    """Round a value down to the nearest step increment.

    Uses integer division to ensure we always round DOWN (never up),
    which prevents selling past the target or exceeding the free balance.
    Works for any step, not only powers of ten.

    Args:
        value: The raw quantity to round.
        step: The minimum increment (e.g., 0.01 for AVAX).

    Returns:
        The value rounded down to the nearest step.
    """
    return (value // step) * step


def format_quantity(quantity: Decimal) -> str:
    """Render a quantity in plain notation ("3.75", "10"), never "1E+1"."""
    text = format(quantity.normalize(), "f")
    return text if text != "-0" else "0"
