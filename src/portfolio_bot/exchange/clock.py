"""Exchange server-time synchronization.

Signed requests carry a millisecond timestamp that the exchange rejects when
it drifts outside its receive window. The clock is synced once per run and the
offset is applied to every signed request afterwards.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

from portfolio_bot.exceptions import ClockNotSyncedError
from portfolio_bot.logging import get_logger

logger = get_logger(__name__)


class ServerTimeSource(Protocol):
    async def fetch_server_time(self) -> int: ...


class ServerClock:
    """Holds offset = server time - local time, written once by sync().

    Args:
        time_source: Local clock in seconds; time.time unless testing.
    """

    def __init__(self, time_source: Callable[[], float] = time.time) -> None:
        self._time_source = time_source
        self._offset_ms: int | None = None

    def _local_ms(self) -> int:
        return int(self._time_source() * 1000)

    async def sync(self, source: ServerTimeSource) -> int:
        """Fetch exchange time once and store the offset.

        Errors propagate. There is no fallback to unsynced local time.

        Returns:
            The offset in milliseconds.
        """
        server_ms = await source.fetch_server_time()
        self._offset_ms = int(server_ms) - self._local_ms()
        logger.info("server_time_synced", offset_ms=self._offset_ms)
        return self._offset_ms

    @property
    def synced(self) -> bool:
        return self._offset_ms is not None

    @property
    def offset_ms(self) -> int:
        if self._offset_ms is None:
            raise ClockNotSyncedError("Server clock has not been synced")
        return self._offset_ms

    def now_ms(self) -> int:
        """Synchronized timestamp in milliseconds."""
        return self._local_ms() + self.offset_ms
