"""Paper executor: records what would have been sold without touching the exchange."""

import time
from uuid import uuid4

from portfolio_bot.execution.executor import Executor
from portfolio_bot.logging import get_logger
from portfolio_bot.models import OrderRequest, OrderResult

logger = get_logger(__name__)


class PaperExecutor(Executor):
    """Simulated executor. All results have is_simulated=True."""

    def __init__(self) -> None:
        self._orders: list[OrderResult] = []

    @property
    def orders(self) -> list[OrderResult]:
        """Simulated orders in submission order."""
        return list(self._orders)

    async def place_order(self, request: OrderRequest) -> OrderResult:
        result = OrderResult(
            order_id=f"paper-{uuid4().hex[:12]}",
            pair=request.pair,
            side=request.side,
            quantity=request.quantity,
            timestamp=time.time(),
            is_simulated=True,
        )
        self._orders.append(result)
        logger.info(
            "paper_order_simulated",
            order_id=result.order_id,
            pair=request.pair,
            side=request.side.value,
            quantity=str(request.quantity),
        )
        return result
