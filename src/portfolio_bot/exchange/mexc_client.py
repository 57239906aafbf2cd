"""MEXC spot exchange client implementation via aiohttp.

Talks to the MEXC v3 REST API directly so the signed query string is exactly
the string on the wire:

- GET  /api/v3/time                       server time (unsigned)
- GET  /api/v3/ticker/price?symbol=..     last price (unsigned)
- GET  /api/v3/exchangeInfo?symbol=..     trading rules (unsigned)
- GET  /api/v3/account?timestamp=..&signature=..                    (signed)
- POST /api/v3/order?symbol=..&side=SELL&type=MARKET&quantity=..&timestamp=..&signature=..  (signed)

Signed calls carry the X-MEXC-APIKEY header and a timestamp from the
synchronized ServerClock. There are no internal retries; a failed run is
retried by the external scheduler.
"""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal, InvalidOperation
from typing import Any

import aiohttp
from yarl import URL

from portfolio_bot.config import ExchangeSettings
from portfolio_bot.exceptions import (
    ExchangeAPIError,
    ExchangeAuthError,
    ExchangeNetworkError,
    NoUsablePrecisionError,
    PriceUnavailableError,
    SymbolNotFoundError,
)
from portfolio_bot.exchange.client import ExchangeClient
from portfolio_bot.exchange.clock import ServerClock
from portfolio_bot.exchange.signing import build_query, signed_query
from portfolio_bot.exchange.types import LotRule, format_quantity
from portfolio_bot.logging import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "X-MEXC-APIKEY"

# Invalid key/signature, timestamp outside recvWindow, IP not whitelisted, no permission
_AUTH_ERROR_CODES = {700001, 700002, 700003, 700006, 700007, 10072, -2015, -1022, -1021}


def _to_decimal(value: Any) -> Decimal | None:
    """Decimal(str(value)) or None when the value is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


class MexcClient(ExchangeClient):
    """Concrete MEXC spot client.

    Args:
        settings: Exchange credentials, base URL, quote currency and timeout.
        clock: Synchronized clock used to timestamp signed requests.
        session: Optional pre-built aiohttp session (tests); created lazily otherwise.
    """

    def __init__(
        self,
        settings: ExchangeSettings,
        clock: ServerClock,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._base_url = settings.base_url.rstrip("/")
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._settings.request_timeout)
            )
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session if one was opened."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("mexc_session_closed")
        self._session = None

    def pair_for(self, asset: str) -> str:
        return f"{asset.upper()}{self._settings.quote_currency}"

    # ------------------------------------------------------------------
    # Public endpoints
    # ------------------------------------------------------------------

    async def fetch_server_time(self) -> int:
        data = await self._send("GET", "/api/v3/time")
        server_time = data.get("serverTime") if isinstance(data, dict) else None
        if server_time is None:
            raise ExchangeAPIError("Server time response has no serverTime")
        try:
            return int(server_time)
        except (TypeError, ValueError) as exc:
            raise ExchangeAPIError(f"Unparseable serverTime: {server_time!r}") from exc

    async def fetch_price(self, pair: str) -> Decimal:
        try:
            data = await self._send("GET", "/api/v3/ticker/price", build_query({"symbol": pair}))
        except ExchangeAuthError:
            raise
        except ExchangeAPIError as exc:
            raise PriceUnavailableError(f"No price for {pair}: {exc}") from exc

        raw = data.get("price") if isinstance(data, dict) else None
        price = _to_decimal(raw)
        if price is None or price < 0:
            raise PriceUnavailableError(f"Unparseable price for {pair}: {raw!r}")
        logger.debug("price_fetched", pair=pair, price=str(price))
        return price

    async def fetch_lot_rule(self, pair: str) -> LotRule:
        try:
            data = await self._send("GET", "/api/v3/exchangeInfo", build_query({"symbol": pair}))
        except ExchangeAuthError:
            raise
        except ExchangeAPIError as exc:
            if exc.status == 400:
                raise SymbolNotFoundError(f"Symbol {pair} not found in trading rules") from exc
            raise

        symbols = data.get("symbols") if isinstance(data, dict) else None
        row = next(
            (s for s in symbols or [] if isinstance(s, dict) and s.get("symbol") == pair),
            None,
        )
        if row is None:
            raise SymbolNotFoundError(f"Symbol {pair} not found in trading rules")

        step_size = self._parse_step_size(pair, row)
        min_qty = self._parse_min_qty(row) or step_size
        rule = LotRule(pair=pair, step_size=step_size, min_qty=min_qty)
        logger.debug(
            "lot_rule_fetched", pair=pair, step_size=str(step_size), min_qty=str(min_qty)
        )
        return rule

    # ------------------------------------------------------------------
    # Signed endpoints
    # ------------------------------------------------------------------

    async def fetch_balances(self, assets: list[str]) -> dict[str, Decimal]:
        query = signed_query({}, self._secret(), self._clock.now_ms())
        data = await self._send("GET", "/api/v3/account", query, headers=self._auth_headers())

        rows = data.get("balances") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise ExchangeAPIError("Account response has no balances list")

        wanted = set(assets)
        found: dict[str, Decimal] = {}
        for row in rows:
            name = row.get("asset") if isinstance(row, dict) else None
            if name not in wanted:
                continue
            amount = _to_decimal(row.get("free"))
            if amount is None:
                raise ExchangeAPIError(f"Unparseable balance for {name}: {row.get('free')!r}")
            found[name] = amount

        # Absent from the account means nothing held, not an error.
        return {asset: found.get(asset, Decimal("0")) for asset in assets}

    async def submit_market_sell(self, pair: str, quantity: Decimal) -> dict:
        if quantity <= 0:
            raise ValueError(f"Sell quantity must be positive, got {quantity}")
        params = {
            "symbol": pair,
            "side": "SELL",
            "type": "MARKET",
            "quantity": format_quantity(quantity),
        }
        query = signed_query(params, self._secret(), self._clock.now_ms())
        logger.info("submitting_market_sell", pair=pair, quantity=params["quantity"])
        data = await self._send("POST", "/api/v3/order", query, headers=self._auth_headers())
        return data if isinstance(data, dict) else {"response": data}

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _secret(self) -> str:
        return self._settings.api_secret.get_secret_value()

    def _auth_headers(self) -> dict[str, str]:
        return {
            API_KEY_HEADER: self._settings.api_key.get_secret_value(),
            "Content-Type": "application/json",
        }

    async def _send(
        self,
        method: str,
        path: str,
        query: str = "",
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Perform one request and return the decoded JSON payload.

        The query string is passed through untouched (encoded=True) so the
        signature matches the bytes sent. Error messages carry the path only.
        """
        url = f"{self._base_url}{path}"
        if query:
            url = f"{url}?{query}"
        session = self._get_session()

        try:
            async with session.request(
                method, URL(url, encoded=True), headers=headers or {}
            ) as response:
                status = response.status
                text = await response.text()
        except asyncio.TimeoutError as exc:
            raise ExchangeNetworkError(f"{method} {path} timed out") from exc
        except aiohttp.ClientError as exc:
            raise ExchangeNetworkError(f"{method} {path} failed: {exc}") from exc

        try:
            payload = json.loads(text) if text else {}
        except ValueError:
            payload = None

        code = payload.get("code") if isinstance(payload, dict) else None
        message = payload.get("msg") if isinstance(payload, dict) else None

        if status >= 400:
            detail = f"{method} {path} -> HTTP {status}: {message or text[:200]}"
            if status in (401, 403) or code in _AUTH_ERROR_CODES:
                raise ExchangeAuthError(detail, status=status, code=code)
            raise ExchangeAPIError(detail, status=status, code=code)

        if payload is None:
            raise ExchangeAPIError(f"{method} {path} returned unparseable body", status=status)

        if code not in (None, 0, 200) and message is not None:
            detail = f"{method} {path} -> code {code}: {message}"
            if code in _AUTH_ERROR_CODES:
                raise ExchangeAuthError(detail, status=status, code=code)
            raise ExchangeAPIError(detail, status=status, code=code)

        return payload

    @staticmethod
    def _parse_step_size(pair: str, row: dict) -> Decimal:
        """Step from baseSizePrecision, else 10**-baseAssetPrecision. Never guessed."""
        raw_step = row.get("baseSizePrecision")
        if raw_step not in (None, ""):
            step = _to_decimal(raw_step)
            if step is None or step < 0:
                raise NoUsablePrecisionError(
                    f"{pair}: baseSizePrecision is not numeric: {raw_step!r}"
                )
            if step > 0:
                return step

        digits = row.get("baseAssetPrecision")
        if isinstance(digits, str) and digits.strip().isdigit():
            digits = int(digits)
        if isinstance(digits, int) and not isinstance(digits, bool) and digits >= 0:
            return Decimal(1).scaleb(-digits)

        raise NoUsablePrecisionError(f"{pair}: no usable quantity precision in trading rules")

    @staticmethod
    def _parse_min_qty(row: dict) -> Decimal | None:
        for rule in row.get("filters") or []:
            if isinstance(rule, dict) and rule.get("filterType") == "LOT_SIZE":
                min_qty = _to_decimal(rule.get("minQty"))
                if min_qty is not None and min_qty > 0:
                    return min_qty
        return None
