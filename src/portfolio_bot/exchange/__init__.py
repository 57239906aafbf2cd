"""Exchange client layer -- MEXC spot API integration via aiohttp."""

from portfolio_bot.exchange.client import ExchangeClient
from portfolio_bot.exchange.clock import ServerClock
from portfolio_bot.exchange.mexc_client import MexcClient
from portfolio_bot.exchange.types import LotRule, format_quantity, round_to_step

__all__ = [
    "ExchangeClient",
    "LotRule",
    "MexcClient",
    "ServerClock",
    "format_quantity",
    "round_to_step",
]
