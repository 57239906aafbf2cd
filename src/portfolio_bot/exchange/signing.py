"""Helpers for signing MEXC spot API requests.

The signature is computed over the exact query-string bytes that go on the
wire, so the query is built once here and never re-encoded afterwards.
"""

from __future__ import annotations

import hashlib
import hmac
from urllib.parse import urlencode


def build_query(params: dict[str, object]) -> str:
    """Build a query string in insertion order, skipping None values."""
    filtered = [(k, v) for k, v in params.items() if v is not None]
    return urlencode(filtered)


def sign_payload(secret: str, payload: str) -> str:
    """Return the lower-case HMAC-SHA256 hex digest for payload."""
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def signed_query(params: dict[str, object], api_secret: str, timestamp: int) -> str:
    """Append timestamp, sign, and return "<query>&signature=<hex>"."""
    query = build_query({**params, "timestamp": timestamp})
    signature = sign_payload(api_secret, query)
    return f"{query}&signature={signature}"
