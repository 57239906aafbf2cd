"""Telegram Bot API notifier (sendMessage, HTML parse mode)."""

from __future__ import annotations

import asyncio

import aiohttp

from portfolio_bot.config import TelegramSettings
from portfolio_bot.exceptions import NotificationError
from portfolio_bot.logging import get_logger
from portfolio_bot.notifications.base import Notifier
from portfolio_bot.notifications.formatting import truncate_message

logger = get_logger(__name__)


class TelegramNotifier(Notifier):
    """Posts messages to one chat through the Bot API.

    Error messages never include the request URL, which embeds the bot token.

    Args:
        settings: Bot token, chat id, API url and timeout.
        session: Optional pre-built aiohttp session (tests).
    """

    def __init__(
        self,
        settings: TelegramSettings,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._settings = settings
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._settings.request_timeout)
            )
        return self._session

    @property
    def _endpoint(self) -> str:
        token = self._settings.bot_token.get_secret_value()
        return f"{self._settings.api_url.rstrip('/')}/bot{token}/sendMessage"

    async def send(self, message: str) -> None:
        payload = {
            "chat_id": self._settings.chat_id,
            "text": truncate_message(message),
            "parse_mode": "HTML",
        }
        session = self._get_session()
        try:
            async with session.post(self._endpoint, json=payload) as response:
                status = response.status
                body = await response.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise NotificationError("Telegram request timed out") from exc
        except (aiohttp.ClientError, ValueError) as exc:
            raise NotificationError(f"Telegram request failed: {type(exc).__name__}") from exc

        if status >= 400 or not (isinstance(body, dict) and body.get("ok")):
            description = body.get("description") if isinstance(body, dict) else None
            raise NotificationError(f"Telegram API HTTP {status}: {description or 'not ok'}")

        logger.debug("telegram_message_sent", chars=len(payload["text"]))

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
