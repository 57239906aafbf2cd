"""Shared test fixtures for the portfolio monitor."""

from decimal import Decimal

import pytest

from portfolio_bot.config import (
    AppSettings,
    ExchangeSettings,
    PortfolioSettings,
    RedactionSettings,
    TelegramSettings,
    TrimSettings,
)


@pytest.fixture
def mock_settings() -> AppSettings:
    """AppSettings with test credentials, two assets and trimming in paper mode."""
    return AppSettings(
        log_level="DEBUG",
        exchange=ExchangeSettings(
            api_key="test-api-key",  # type: ignore[arg-type]
            api_secret="test-api-secret",  # type: ignore[arg-type]
        ),
        portfolio=PortfolioSettings(
            assets=["AVAX", "BTC"],  # type: ignore[arg-type]
            base_value_per_asset=Decimal("500"),
            alert_threshold=Decimal("1000"),
        ),
        trim=TrimSettings(enabled=True, mode="paper"),
        telegram=TelegramSettings(
            bot_token="123:bot-token",  # type: ignore[arg-type]
            chat_id="42",
        ),
        redaction=RedactionSettings(vpn_ip="10.8.0.2"),  # type: ignore[arg-type]
    )
