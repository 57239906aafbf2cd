"""Tests for PortfolioSnapshotBuilder."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from portfolio_bot.exceptions import ExchangeNetworkError, PriceUnavailableError
from portfolio_bot.exchange.client import ExchangeClient
from portfolio_bot.portfolio.snapshot import PortfolioSnapshotBuilder


@pytest.fixture
def exchange_client() -> MagicMock:
    client = MagicMock(spec=ExchangeClient)
    client.pair_for.side_effect = lambda asset: f"{asset}USDT"
    client.fetch_balances = AsyncMock(
        return_value={"AVAX": Decimal("10"), "BTC": Decimal("0")}
    )
    prices = {"AVAXUSDT": Decimal("80"), "BTCUSDT": Decimal("60000")}
    client.fetch_price = AsyncMock(side_effect=lambda pair: prices[pair])
    return client


class TestSnapshotBuilder:
    @pytest.mark.asyncio
    async def test_builds_holdings_in_configured_order(self, exchange_client: MagicMock) -> None:
        snapshot = await PortfolioSnapshotBuilder(exchange_client).build(["AVAX", "BTC"])

        assert [h.asset for h in snapshot.holdings] == ["AVAX", "BTC"]
        assert [h.pair for h in snapshot.holdings] == ["AVAXUSDT", "BTCUSDT"]
        assert snapshot.holdings[0].amount == Decimal("10")
        assert snapshot.holdings[1].price == Decimal("60000")
        assert snapshot.total_value == Decimal("800")

    @pytest.mark.asyncio
    async def test_one_balance_call_one_price_call_per_asset(
        self, exchange_client: MagicMock
    ) -> None:
        await PortfolioSnapshotBuilder(exchange_client).build(["AVAX", "BTC"])

        exchange_client.fetch_balances.assert_awaited_once_with(["AVAX", "BTC"])
        assert [c.args[0] for c in exchange_client.fetch_price.await_args_list] == [
            "AVAXUSDT",
            "BTCUSDT",
        ]

    @pytest.mark.asyncio
    async def test_zero_balance_asset_is_still_priced(self, exchange_client: MagicMock) -> None:
        snapshot = await PortfolioSnapshotBuilder(exchange_client).build(["BTC"])
        assert snapshot.holdings[0].amount == Decimal("0")
        assert snapshot.total_value == Decimal("0")

    @pytest.mark.asyncio
    async def test_price_failure_aborts_snapshot(self, exchange_client: MagicMock) -> None:
        exchange_client.fetch_price.side_effect = PriceUnavailableError("No price for BTCUSDT")
        with pytest.raises(PriceUnavailableError):
            await PortfolioSnapshotBuilder(exchange_client).build(["AVAX", "BTC"])

    @pytest.mark.asyncio
    async def test_balance_failure_skips_prices(self, exchange_client: MagicMock) -> None:
        exchange_client.fetch_balances.side_effect = ExchangeNetworkError("GET /api/v3/account failed")
        with pytest.raises(ExchangeNetworkError):
            await PortfolioSnapshotBuilder(exchange_client).build(["AVAX"])
        exchange_client.fetch_price.assert_not_awaited()
