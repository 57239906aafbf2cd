"""Tests for TelegramNotifier.

Verifies:
- sendMessage payload (chat_id, HTML parse mode, truncated text)
- Non-ok responses and transport failures raise NotificationError
- Error messages never contain the bot token
"""

import asyncio
import json
from typing import Any

import aiohttp
import pytest

from portfolio_bot.config import TelegramSettings
from portfolio_bot.exceptions import NotificationError
from portfolio_bot.notifications.formatting import TELEGRAM_MAX_LEN
from portfolio_bot.notifications.telegram import TelegramNotifier

TOKEN = "123:bot-token"


class FakeResponse:
    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self._body = body

    async def json(self, content_type: str | None = "application/json") -> Any:
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: object) -> bool:
        return False


class FakeSession:
    def __init__(self, response: Any) -> None:
        self._response = response
        self.posts: list[tuple[str, dict]] = []
        self.closed = False

    def post(self, url: str, json: dict) -> FakeResponse:
        self.posts.append((url, json))
        if isinstance(self._response, BaseException):
            raise self._response
        return self._response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def telegram_settings() -> TelegramSettings:
    return TelegramSettings(bot_token=TOKEN, chat_id="42")  # type: ignore[arg-type]


def make_notifier(settings: TelegramSettings, response: Any) -> tuple[TelegramNotifier, FakeSession]:
    session = FakeSession(response)
    return TelegramNotifier(settings, session=session), session  # type: ignore[arg-type]


class TestSend:
    @pytest.mark.asyncio
    async def test_posts_send_message(self, telegram_settings: TelegramSettings) -> None:
        notifier, session = make_notifier(
            telegram_settings, FakeResponse(200, {"ok": True, "result": {}})
        )
        await notifier.send("<b>hello</b>")

        url, payload = session.posts[0]
        assert url == f"https://api.telegram.org/bot{TOKEN}/sendMessage"
        assert payload == {"chat_id": "42", "text": "<b>hello</b>", "parse_mode": "HTML"}

    @pytest.mark.asyncio
    async def test_long_text_is_truncated(self, telegram_settings: TelegramSettings) -> None:
        notifier, session = make_notifier(telegram_settings, FakeResponse(200, {"ok": True}))
        await notifier.send("x" * 10_000)
        assert len(session.posts[0][1]["text"]) == TELEGRAM_MAX_LEN

    @pytest.mark.asyncio
    async def test_api_error_raises(self, telegram_settings: TelegramSettings) -> None:
        notifier, _ = make_notifier(
            telegram_settings,
            FakeResponse(400, {"ok": False, "description": "Bad Request: chat not found"}),
        )
        with pytest.raises(NotificationError, match="HTTP 400: Bad Request: chat not found"):
            await notifier.send("hi")

    @pytest.mark.asyncio
    async def test_ok_false_with_200_raises(self, telegram_settings: TelegramSettings) -> None:
        notifier, _ = make_notifier(telegram_settings, FakeResponse(200, {"ok": False}))
        with pytest.raises(NotificationError, match="not ok"):
            await notifier.send("hi")

    @pytest.mark.asyncio
    async def test_unparseable_body_raises(self, telegram_settings: TelegramSettings) -> None:
        notifier, _ = make_notifier(telegram_settings, FakeResponse(502, "<html>Bad Gateway</html>"))
        with pytest.raises(NotificationError, match="JSONDecodeError"):
            await notifier.send("hi")

    @pytest.mark.asyncio
    async def test_timeout_raises(self, telegram_settings: TelegramSettings) -> None:
        notifier, _ = make_notifier(telegram_settings, asyncio.TimeoutError())
        with pytest.raises(NotificationError, match="timed out"):
            await notifier.send("hi")

    @pytest.mark.asyncio
    async def test_transport_error_hides_token(self, telegram_settings: TelegramSettings) -> None:
        notifier, _ = make_notifier(
            telegram_settings,
            aiohttp.ClientConnectionError(f"Cannot connect to /bot{TOKEN}/sendMessage"),
        )
        with pytest.raises(NotificationError) as excinfo:
            await notifier.send("hi")
        assert TOKEN not in str(excinfo.value)


class TestClose:
    @pytest.mark.asyncio
    async def test_close_closes_session(self, telegram_settings: TelegramSettings) -> None:
        notifier, session = make_notifier(telegram_settings, FakeResponse(200, {"ok": True}))
        await notifier.close()
        assert session.closed is True

    def test_configured_requires_token_and_chat(self) -> None:
        assert TelegramSettings(bot_token=TOKEN, chat_id="42").configured is True  # type: ignore[arg-type]
        assert TelegramSettings(bot_token=TOKEN, chat_id="").configured is False  # type: ignore[arg-type]
