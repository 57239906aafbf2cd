"""Live trading executor via exchange client.

Delegates order submission to the ExchangeClient. Only MARKET SELL is
supported; the trim policy never buys.
"""

import time

from portfolio_bot.exchange.client import ExchangeClient
from portfolio_bot.execution.executor import Executor
from portfolio_bot.logging import get_logger
from portfolio_bot.models import OrderRequest, OrderResult, OrderSide, OrderType

logger = get_logger(__name__)


class LiveExecutor(Executor):
    """Real order executor that delegates to an exchange client.

    Args:
        exchange_client: The exchange client to place real orders through.
    """

    def __init__(self, exchange_client: ExchangeClient) -> None:
        self._exchange_client = exchange_client

    async def place_order(self, request: OrderRequest) -> OrderResult:
        """Place a real market sell on the exchange.

        Fire-and-log: the acknowledgement is returned as-is and the fill is
        never polled.

        Raises:
            ValueError: For anything other than a MARKET SELL.
            Exception: Any exchange error propagated from the client.
        """
        if request.side is not OrderSide.SELL or request.order_type is not OrderType.MARKET:
            raise ValueError(
                f"Unsupported order {request.side.value} {request.order_type.value}"
            )

        ack = await self._exchange_client.submit_market_sell(request.pair, request.quantity)

        order_id = str(ack.get("orderId", ""))
        transact_time = ack.get("transactTime")
        ts = float(transact_time) / 1000.0 if transact_time else time.time()

        logger.info(
            "live_order_submitted",
            order_id=order_id,
            pair=request.pair,
            side=request.side.value,
            quantity=str(request.quantity),
        )

        return OrderResult(
            order_id=order_id,
            pair=request.pair,
            side=request.side,
            quantity=request.quantity,
            timestamp=ts,
            is_simulated=False,
            raw=ack,
        )
