"""Scrubs credentials and private identifiers out of error text."""

from __future__ import annotations

from collections.abc import Mapping

from portfolio_bot.config import AppSettings


class Redactor:
    """Substring-replaces each configured secret with its placeholder.

    Args:
        secrets: Mapping of placeholder -> secret value. Empty values are ignored.
    """

    def __init__(self, secrets: Mapping[str, str]) -> None:
        pairs = [(value, placeholder) for placeholder, value in secrets.items() if value]
        # Longest first so a secret containing another is replaced whole
        self._pairs = sorted(pairs, key=lambda item: len(item[0]), reverse=True)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> Redactor:
        return cls(
            {
                "[REDACTED_API_KEY]": settings.exchange.api_key.get_secret_value(),
                "[REDACTED_API_SECRET]": settings.exchange.api_secret.get_secret_value(),
                "[REDACTED_BOT_TOKEN]": settings.telegram.bot_token.get_secret_value(),
                "[REDACTED_VPN_IP]": settings.redaction.vpn_ip.get_secret_value(),
            }
        )

    def redact(self, text: str) -> str:
        for value, placeholder in self._pairs:
            text = text.replace(value, placeholder)
        return text

    __call__ = redact
