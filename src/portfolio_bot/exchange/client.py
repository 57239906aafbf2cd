"""Abstract exchange client interface.

Defines the contract for all exchange implementations.
Snapshot, trim and execution code depends only on this interface,
keeping MEXC-specific details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from portfolio_bot.exchange.types import LotRule


class ExchangeClient(ABC):
    """Abstract base class for exchange API clients.

    Usable as an async context manager; the session is closed on exit.
    """

    async def __aenter__(self) -> "ExchangeClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @abstractmethod
    async def close(self) -> None:
        """Release the HTTP session."""
        ...

    @abstractmethod
    async def fetch_server_time(self) -> int:
        """Return exchange server time in epoch milliseconds."""
        ...

    @abstractmethod
    async def fetch_price(self, pair: str) -> Decimal:
        """Return the last price of a pair, e.g. AVAXUSDT.

        Raises:
            PriceUnavailableError: Unknown pair or unparseable response.
        """
        ...

    @abstractmethod
    async def fetch_balances(self, assets: list[str]) -> dict[str, Decimal]:
        """Return free balances for exactly the requested assets.

        Assets missing from the account response map to Decimal("0").
        """
        ...

    @abstractmethod
    async def fetch_lot_rule(self, pair: str) -> LotRule:
        """Return quantity step and minimum for a pair.

        Raises:
            SymbolNotFoundError: Pair absent from trading rules.
            NoUsablePrecisionError: Precision missing or non-numeric.
        """
        ...

    @abstractmethod
    async def submit_market_sell(self, pair: str, quantity: Decimal) -> dict:
        """Place a MARKET SELL order. Irreversible.

        Returns:
            The raw exchange acknowledgement.
        """
        ...

    @abstractmethod
    def pair_for(self, asset: str) -> str:
        """Return the trading pair for an asset against the quote currency."""
        ...
