"""Abstract executor interface.

Defines the contract for order execution. Both PaperExecutor and LiveExecutor
implement this ABC, so the trim engine is identical regardless of mode.
"""

from abc import ABC, abstractmethod

from portfolio_bot.models import OrderRequest, OrderResult


class Executor(ABC):
    """Abstract base class for order executors.

    The trim engine depends ONLY on this interface. The concrete executor
    (paper or live) is injected at startup based on TrimSettings.mode.
    """

    @abstractmethod
    async def place_order(self, request: OrderRequest) -> OrderResult:
        """Submit an order and return the acknowledgement.

        Args:
            request: Order parameters (pair, side, type, quantity).

        Returns:
            OrderResult with the exchange order id (or a simulated one).

        Raises:
            ExchangeError: If the exchange rejects or cannot be reached.
        """
        ...
