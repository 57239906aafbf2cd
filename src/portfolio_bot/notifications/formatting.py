"""HTML message builders for the operator channel.

Telegram's HTML mode needs &, < and > escaped in every dynamic fragment.
"""

from __future__ import annotations

import html
import traceback
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

TELEGRAM_MAX_LEN = 4096
_MAX_ERROR_MESSAGE = 1000


def escape_html(text: str) -> str:
    return html.escape(text, quote=False)


def truncate_message(message: str, limit: int = TELEGRAM_MAX_LEN) -> str:
    if len(message) <= limit:
        return message
    return message[: limit - 1] + "…"


def format_report_message(lines: Sequence[str]) -> str:
    return "\n".join(escape_html(line) for line in lines)


def format_alert_message(text: str) -> str:
    return f"🚨 <b>Portfolio Alert</b> {escape_html(text)}"


def format_trim_message(title: str, fields: dict[str, object]) -> str:
    body = "\n".join(
        f"<b>{escape_html(name)}:</b> <code>{escape_html(str(value))}</code>"
        for name, value in fields.items()
    )
    return f"<b>{escape_html(title)}</b>\n{body}"


def clip_escaped(text: str, limit: int) -> str:
    """Escape text, then keep at most limit characters without splitting an entity."""
    escaped = escape_html(text)
    if len(escaped) <= limit:
        return escaped
    clipped = escaped[: max(limit, 0)]
    amp = clipped.rfind("&")
    if amp != -1 and ";" not in clipped[amp:]:
        clipped = clipped[:amp]
    return clipped


def tail_escaped(text: str, limit: int, marker: str = "...\n") -> str:
    """Escape the end of text so the result, marker included, fits in limit.

    Trimming happens on the raw text before escaping, so entities stay whole.
    """
    escaped = escape_html(text)
    if len(escaped) <= limit:
        return escaped
    room = limit - len(marker)
    if room <= 0:
        return ""
    raw = text[-room:]
    escaped = escape_html(raw)
    while len(escaped) > room:
        raw = raw[len(escaped) - room :]
        escaped = escape_html(raw)
    return marker + escaped


def format_error_alert(
    exc: BaseException,
    redact: Callable[[str], str] = lambda text: text,
    now: datetime | None = None,
    limit: int = TELEGRAM_MAX_LEN,
) -> str:
    """Error alert with time, type, redacted message and the traceback tail.

    The message is capped after escaping and the traceback gets whatever room
    is left, trimmed from the front, so every tag stays closed.
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    message = clip_escaped(redact(str(exc)), _MAX_ERROR_MESSAGE)
    trace = redact("".join(traceback.format_exception(exc)))

    header = "\n".join(
        [
            "<b>🛑 Error Alert</b>",
            f"<b>Time:</b> <code>{timestamp}</code>",
            f"<b>Type:</b> {escape_html(type(exc).__name__)}",
            f"<b>Message:</b> <code>{message}</code>",
            "<b>Stack Trace:</b>",
        ]
    )

    budget = limit - len(header) - len("\n<pre></pre>")
    return f"{header}\n<pre>{tail_escaped(trace, budget)}</pre>"
