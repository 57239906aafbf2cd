"""Alert threshold policy."""

from decimal import Decimal
from typing import Literal

AlertDirection = Literal["at_or_above", "below"]


def threshold_crossed(total: Decimal, threshold: Decimal, direction: AlertDirection) -> bool:
    """Return True when the portfolio total should raise the alert.

    "at_or_above" fires on total >= threshold, "below" on total < threshold.
    """
    if direction == "at_or_above":
        return total >= threshold
    if direction == "below":
        return total < threshold
    raise ValueError(f"Unknown alert direction: {direction!r}")
