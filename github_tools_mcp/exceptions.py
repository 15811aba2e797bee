"""Custom exception types used across the GitHub tools MCP server.

Every upstream failure maps to exactly one of the ``GitHubError`` subclasses
below. ``GitHubAPIError`` is the generic variant.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional


class GitHubError(Exception):
    """Base class for classified GitHub failures."""

    label = "GitHub API Error"

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        response: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.response = response


class GitHubAPIError(GitHubError):
    pass


class GitHubValidationError(GitHubError):
    label = "Validation Error"


class GitHubNotFoundError(GitHubError):
    label = "Not Found"


class GitHubAuthError(GitHubError):
    label = "Authentication Failed"


class GitHubPermissionError(GitHubError):
    label = "Permission Denied"


class GitHubConflictError(GitHubError):
    label = "Conflict"


class GitHubRateLimitError(GitHubError):
    """Raised when GitHub responds with a rate limit error."""

    label = "Rate Limit Exceeded"

    def __init__(
        self,
        message: str,
        reset_at: datetime,
        status: Optional[int] = 429,
        response: Any = None,
    ) -> None:
        super().__init__(message, status, response)
        self.reset_at = reset_at


__all__ = [
    "GitHubAPIError",
    "GitHubAuthError",
    "GitHubConflictError",
    "GitHubError",
    "GitHubNotFoundError",
    "GitHubPermissionError",
    "GitHubRateLimitError",
    "GitHubValidationError",
]
