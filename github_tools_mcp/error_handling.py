"""Classify upstream failures into the closed GitHub error taxonomy.

Contract notes:
- ``error_for_status`` and ``error_for_graphql`` are total: every input maps
  to exactly one ``GitHubError`` subclass, falling back to ``GitHubAPIError``.
- Domain errors raised elsewhere pass through ``wrap_unexpected`` unchanged.
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Optional

from github_tools_mcp.exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubConflictError,
    GitHubError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from github_tools_mcp.http_utils import parse_rate_limit_reset_epoch, rate_limit_exhausted

# Used when GitHub signals a rate limit without saying when it resets.
DEFAULT_RATE_LIMIT_WINDOW_SECONDS = 60.0


def _body_message(body: Any) -> str:
    if isinstance(body, Mapping):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return ""


def _is_rate_limit_message(message: str) -> bool:
    lowered = message.lower()
    return (
        "rate limit" in lowered
        or "secondary rate limit" in lowered
        or "abuse detection" in lowered
    )


def _rate_limit_reset_at(
    headers: Mapping[str, str], body: Any, *, now: Optional[float] = None
) -> datetime:
    if now is None:
        now = time.time()

    epoch = parse_rate_limit_reset_epoch(headers, now=now)
    if epoch is None and isinstance(body, Mapping):
        raw = body.get("reset_at")
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            epoch = float(raw)
        elif isinstance(raw, str) and raw.strip():
            try:
                parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
            except ValueError:
                parsed = None
            if parsed is not None:
                if parsed.tzinfo is None:
                    parsed = parsed.replace(tzinfo=timezone.utc)
                epoch = parsed.timestamp()

    if epoch is not None:
        try:
            return datetime.fromtimestamp(epoch, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    return datetime.fromtimestamp(now + DEFAULT_RATE_LIMIT_WINDOW_SECONDS, tz=timezone.utc)


def error_for_status(
    status_code: int,
    body: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    *,
    now: Optional[float] = None,
) -> GitHubError:
    """Map a non-2xx GitHub response onto the error taxonomy."""

    headers = headers or {}
    message = _body_message(body)

    if status_code == 429 or (
        status_code == 403 and (rate_limit_exhausted(headers) or _is_rate_limit_message(message))
    ):
        return GitHubRateLimitError(
            message or "Rate limit exceeded",
            reset_at=_rate_limit_reset_at(headers, body, now=now),
            status=status_code,
            response=body,
        )

    if status_code == 401:
        return GitHubAuthError(message or "Authentication failed", status_code, body)
    if status_code == 403:
        return GitHubPermissionError(message or "Insufficient permissions", status_code, body)
    if status_code == 404:
        return GitHubNotFoundError(
            f"Resource not found: {message or 'Not Found'}", status_code, body
        )
    if status_code == 409:
        return GitHubConflictError(
            f"Conflict: {message or 'Resource conflict'}", status_code, body
        )
    if status_code == 422:
        return GitHubValidationError(message or "Validation failed", status_code, body)

    if not message and isinstance(body, str) and body.strip():
        message = f"GitHub API error {status_code}: {body.strip()[:200]}"
    return GitHubAPIError(message or "GitHub API error", status_code, body)


def error_for_graphql(errors: Sequence[Any]) -> GitHubError:
    """Map a GraphQL ``errors`` array onto the error taxonomy.

    Only the first error selects the variant; the full array travels along as
    detail.
    """

    first = errors[0] if errors else {}
    if not isinstance(first, Mapping):
        first = {"message": str(first)}
    error_type = first.get("type")
    message = str(first.get("message") or "Unknown GraphQL error")
    detail = {"errors": list(errors)}

    if error_type == "NOT_FOUND":
        return GitHubNotFoundError(message, 404, detail)
    if error_type == "FORBIDDEN":
        return GitHubPermissionError(message, 403, detail)
    if error_type == "UNPROCESSABLE":
        return GitHubValidationError(f"GraphQL Error: {message}", 422, detail)
    return GitHubAPIError(f"GraphQL Error: {message}", 500, detail)


def wrap_unexpected(exc: BaseException, context: str) -> GitHubError:
    """Return ``exc`` when it is already classified, else a generic wrapper."""

    if isinstance(exc, GitHubError):
        return exc
    text = str(exc) or exc.__class__.__name__
    return GitHubAPIError(f"Failed to {context}: {text}", 500, {"error": text})


__all__ = [
    "DEFAULT_RATE_LIMIT_WINDOW_SECONDS",
    "error_for_graphql",
    "error_for_status",
    "wrap_unexpected",
]
