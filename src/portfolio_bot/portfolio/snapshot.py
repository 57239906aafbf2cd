"""Portfolio snapshot builder.

Combines one balance call and one price call per configured asset into a
PortfolioSnapshot. Any failed fetch propagates: a partial snapshot would
misstate exposure and could wrongly suppress or trigger the alert.
"""

from portfolio_bot.exchange.client import ExchangeClient
from portfolio_bot.logging import get_logger
from portfolio_bot.models import Holding, PortfolioSnapshot, snapshot_from_holdings

logger = get_logger(__name__)


class PortfolioSnapshotBuilder:
    """Builds valued holdings for a fixed asset list.

    Args:
        exchange_client: Source of balances and prices.
    """

    def __init__(self, exchange_client: ExchangeClient) -> None:
        self._exchange_client = exchange_client

    async def build(self, assets: list[str]) -> PortfolioSnapshot:
        """Fetch balances, then prices one asset at a time in configured order."""
        balances = await self._exchange_client.fetch_balances(list(assets))

        holdings: list[Holding] = []
        for asset in assets:
            pair = self._exchange_client.pair_for(asset)
            price = await self._exchange_client.fetch_price(pair)
            holdings.append(
                Holding(asset=asset, pair=pair, amount=balances[asset], price=price)
            )

        snapshot = snapshot_from_holdings(holdings)
        logger.info(
            "snapshot_built",
            assets=len(snapshot.holdings),
            total_value=str(snapshot.total_value),
        )
        return snapshot
