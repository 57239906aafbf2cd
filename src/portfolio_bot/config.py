"""Configuration system using pydantic-settings with environment variable loading.

Every settings object is frozen. It is built once in main() and passed by
reference to the components that need it; nothing else reads the environment.
"""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """MEXC spot connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="MEXC_", env_file=".env", extra="ignore", frozen=True
    )

    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")
    base_url: str = "https://api.mexc.com"
    quote_currency: str = "USDT"
    request_timeout: float = 30.0  # seconds, whole request

    @field_validator("quote_currency")
    @classmethod
    def _upper_quote(cls, value: str) -> str:
        return value.strip().upper()


class PortfolioSettings(BaseSettings):
    """Tracked assets and alert threshold."""

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_", env_file=".env", extra="ignore", frozen=True
    )

    assets: Annotated[tuple[str, ...], NoDecode] = ()
    base_value_per_asset: Decimal = Field(default=Decimal("0"), ge=0)
    alert_threshold: Decimal = Decimal("0")
    # Revisions of the tracker disagreed on the comparison; pick it explicitly.
    alert_direction: Literal["at_or_above", "below"] = "at_or_above"

    @field_validator("assets", mode="before")
    @classmethod
    def _split_assets(cls, value: object) -> object:
        """Accept "AVAX, BTC,ETH" from the environment; keep order, drop duplicates."""
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            seen: dict[str, None] = {}
            for item in value:
                name = str(item).strip().upper()
                if name:
                    seen.setdefault(name, None)
            return tuple(seen)
        return value


class TrimSettings(BaseSettings):
    """Auto-trim switch. Disabled and simulated unless explicitly enabled."""

    model_config = SettingsConfigDict(
        env_prefix="TRIM_", env_file=".env", extra="ignore", frozen=True
    )

    enabled: bool = False
    mode: Literal["paper", "live"] = "paper"


class TelegramSettings(BaseSettings):
    """Operator channel. Notifications are disabled when token or chat is empty."""

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_", env_file=".env", extra="ignore", frozen=True
    )

    bot_token: SecretStr = SecretStr("")
    chat_id: str = ""
    api_url: str = "https://api.telegram.org"
    request_timeout: float = 15.0

    @property
    def configured(self) -> bool:
        return bool(self.bot_token.get_secret_value() and self.chat_id)


class RedactionSettings(BaseSettings):
    """Extra identifiers scrubbed from error reports besides the credentials."""

    model_config = SettingsConfigDict(
        env_prefix="REDACT_", env_file=".env", extra="ignore", frozen=True
    )

    vpn_ip: SecretStr = SecretStr("")


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    report_file: str | None = None
    exchange: ExchangeSettings = Field(default_factory=ExchangeSettings)
    portfolio: PortfolioSettings = Field(default_factory=PortfolioSettings)
    trim: TrimSettings = Field(default_factory=TrimSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    redaction: RedactionSettings = Field(default_factory=RedactionSettings)

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value
