"""Contract fragments and helpers shared by the tool modules."""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, Dict, TypeVar

from github_tools_mcp.error_handling import wrap_unexpected
from github_tools_mcp.exceptions import GitHubError
from github_tools_mcp.mcp_server.schemas import integer_field, string_field

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

OWNER = string_field("Repository owner (username or organization)")
REPO = string_field("Repository name")
PAGE = integer_field("Page number for pagination (starts at 1)", minimum=1)
PER_PAGE = integer_field("Number of results per page (max 100)", minimum=1, maximum=100)


def github_operation(context: str) -> Callable[[F], F]:
    """Let classified errors through; wrap anything else as a generic GitHub error.

    ``context`` completes the sentence "Failed to ...".
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except GitHubError:
                raise
            except Exception as exc:
                raise wrap_unexpected(exc, context) from exc

        return wrapper  # type: ignore[return-value]

    return decorator


def repo_path(owner: str, repo: str, suffix: str = "") -> str:
    return f"/repos/{owner}/{repo}{suffix}"


def pagination(page: int | None, per_page: int | None) -> Dict[str, Any]:
    return {"page": page, "per_page": per_page}
