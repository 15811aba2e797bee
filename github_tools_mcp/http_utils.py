"""HTTP response helpers shared by the upstream client and error mapping."""

from __future__ import annotations

import time
from datetime import timezone
from email.utils import parsedate_to_datetime
from collections.abc import Mapping
from typing import Any


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, header_value in headers.items():
        if key.lower() == lowered:
            return header_value
    return None


def parse_response_body(resp: Any) -> Any | None:
    """Return the decoded response body.

    JSON content types are decoded; anything else is returned as text. An empty
    body (204 No Content, for example) yields None.
    """

    content = getattr(resp, "content", b"")
    if not content:
        return None

    headers = getattr(resp, "headers", {}) or {}
    content_type = str(headers.get("content-type", "")).lower()
    if "json" in content_type:
        return resp.json()
    return resp.text


def extract_response_json(resp: Any) -> Any | None:
    """Best-effort JSON body extraction.

    Returns None when the response does not contain JSON or parsing fails.
    Used on error paths where the body shape is not guaranteed.
    """

    json_method = getattr(resp, "json", None)
    if not callable(json_method):
        return None
    try:
        return json_method()
    except ValueError:
        return None


def parse_rate_limit_reset_epoch(
    headers: Mapping[str, str],
    *,
    now: float | None = None,
) -> float | None:
    """Return the epoch second at which a rate limit resets, if advertised.

    Order of precedence:
    1) X-RateLimit-Reset (epoch seconds)
    2) Retry-After (delta seconds or an HTTP date)
    """

    if now is None:
        now = time.time()

    reset_header = _get_header(headers, "X-RateLimit-Reset")
    if reset_header and reset_header.strip():
        try:
            return float(reset_header.strip())
        except ValueError:
            pass

    retry_after = _get_header(headers, "Retry-After")
    if retry_after and retry_after.strip():
        try:
            return now + max(0.0, float(retry_after))
        except ValueError:
            try:
                parsed = parsedate_to_datetime(retry_after)
            except (TypeError, ValueError):
                return None
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.timestamp()

    return None


def rate_limit_exhausted(headers: Mapping[str, str]) -> bool:
    return (_get_header(headers, "X-RateLimit-Remaining") or "").strip() == "0"


__all__ = [
    "extract_response_json",
    "parse_rate_limit_reset_epoch",
    "parse_response_body",
    "rate_limit_exhausted",
]
