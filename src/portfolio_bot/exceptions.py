"""Custom exceptions for the portfolio monitor.

All exchange, clock and notification exceptions live here
to avoid circular imports between modules.
"""


class PortfolioBotError(Exception):
    """Base exception for all bot errors."""


class ClockNotSyncedError(PortfolioBotError):
    """Raised when a synchronized timestamp is requested before sync()."""


class ExchangeError(PortfolioBotError):
    """Base class for failed exchange calls."""


class ExchangeNetworkError(ExchangeError):
    """Raised on transport failures and timeouts."""


class ExchangeAPIError(ExchangeError):
    """Raised when the exchange answers with an HTTP or payload error.

    Args:
        message: Human-readable description.
        status: HTTP status code of the response.
        code: Exchange error code from the payload, if any.
    """

    def __init__(
        self, message: str, status: int | None = None, code: int | str | None = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code


class ExchangeAuthError(ExchangeAPIError):
    """Raised when a signed request is rejected (bad key, signature or timestamp)."""


class PriceUnavailableError(PortfolioBotError):
    """Raised when a price is missing, unparseable or the pair does not exist."""


class SymbolNotFoundError(PortfolioBotError):
    """Raised when a trading pair is absent from the exchange trading rules."""


class NoUsablePrecisionError(PortfolioBotError):
    """Raised when the trading rules carry no usable quantity precision."""


class NotificationError(PortfolioBotError):
    """Raised when a message could not be delivered to the operator channel."""
