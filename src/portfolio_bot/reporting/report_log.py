"""Append-only text report, mirrored to the console through structlog.

The file is write-only: nothing reads it back. There is no rotation.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from portfolio_bot.logging import get_logger

logger = get_logger(__name__)


class ReportLog:
    """Persistent sink for human-readable report lines.

    Args:
        path: File to append to. None mirrors to the console only.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None

    @property
    def path(self) -> Path | None:
        return self._path

    def log(self, lines: str | Sequence[str]) -> None:
        """Append lines to the file and echo each to the console.

        A failed file write is logged and otherwise ignored.
        """
        if isinstance(lines, str):
            lines = [lines]
        if self._path is not None:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._path.open("a", encoding="utf-8") as fh:
                    fh.write("\n".join(lines) + "\n")
            except OSError as exc:
                logger.warning("report_log_write_failed", path=str(self._path), error=str(exc))
        for line in lines:
            logger.info("report", line=line)
