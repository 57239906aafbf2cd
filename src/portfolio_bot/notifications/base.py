"""Notifier interface and the best-effort send combinator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from portfolio_bot.logging import get_logger

logger = get_logger(__name__)


class Notifier(ABC):
    """Delivers a human-readable message (HTML subset) to the operator channel."""

    @abstractmethod
    async def send(self, message: str) -> None:
        """Deliver message.

        Raises:
            NotificationError: Delivery failed.
        """
        ...

    async def close(self) -> None:
        """Release transport resources. No-op by default."""


class NullNotifier(Notifier):
    """Used when no operator channel is configured; drops every message."""

    async def send(self, message: str) -> None:
        logger.debug("notification_skipped", reason="no_channel_configured")


async def best_effort(
    send: Awaitable[None],
    *,
    what: str,
    redact: Callable[[str], str] | None = None,
) -> bool:
    """Await a notification and discard any failure.

    Notification is a side channel: a failed delivery must never abort the run
    or mask the result being reported. The failure is logged, then dropped.

    Returns:
        True if delivered, False if the send raised.
    """
    try:
        await send
        return True
    except Exception as exc:
        error = str(exc)
        logger.warning(
            "notification_dropped",
            what=what,
            error_type=type(exc).__name__,
            error=redact(error) if redact else error,
        )
        return False
