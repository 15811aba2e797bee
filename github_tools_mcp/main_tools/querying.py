"""Cross-repository search (code, issues and pull requests, users)."""

from __future__ import annotations

from typing import Any, Dict, Optional

from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import enum_field, string_field, tool_input_schema

from ._shared import PAGE, PER_PAGE, github_operation, pagination

QUERY = string_field("Search query (see GitHub search syntax)")
ORDER = enum_field(["asc", "desc"], "Sort order")


async def _search(client, kind: str, params: Dict[str, Any]) -> Any:
    return await client.rest(f"/search/{kind}", params=params)


@mcp_tool(
    "search_code",
    "Search for code across GitHub repositories",
    tool_input_schema(
        {"q": QUERY, "order": ORDER, "page": PAGE, "per_page": PER_PAGE},
        ["q"],
    ),
)
@github_operation("search code")
async def search_code(
    client,
    q: str,
    order: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    return await _search(client, "code", {"q": q, "order": order, **pagination(page, per_page)})


@mcp_tool(
    "search_issues",
    "Search for issues and pull requests across GitHub repositories",
    tool_input_schema(
        {
            "q": QUERY,
            "sort": enum_field(
                [
                    "comments",
                    "reactions",
                    "reactions-+1",
                    "reactions--1",
                    "reactions-smile",
                    "reactions-thinking_face",
                    "reactions-heart",
                    "reactions-tada",
                    "interactions",
                    "created",
                    "updated",
                ],
                "Sort field",
            ),
            "order": ORDER,
            "page": PAGE,
            "per_page": PER_PAGE,
        },
        ["q"],
    ),
)
@github_operation("search issues")
async def search_issues(
    client,
    q: str,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    params = {"q": q, "sort": sort, "order": order, **pagination(page, per_page)}
    return await _search(client, "issues", params)


@mcp_tool(
    "search_users",
    "Search for users on GitHub",
    tool_input_schema(
        {
            "q": QUERY,
            "sort": enum_field(["followers", "repositories", "joined"], "Sort field"),
            "order": ORDER,
            "page": PAGE,
            "per_page": PER_PAGE,
        },
        ["q"],
    ),
)
@github_operation("search users")
async def search_users(
    client,
    q: str,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    params = {"q": q, "sort": sort, "order": order, **pagination(page, per_page)}
    return await _search(client, "users", params)
