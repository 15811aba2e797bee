from __future__ import annotations

from typing import Any, Dict, Optional

from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import boolean_field, string_field, tool_input_schema

from ._shared import OWNER, PAGE, PER_PAGE, REPO, github_operation, pagination, repo_path


@mcp_tool(
    "search_repositories",
    "Search for GitHub repositories",
    tool_input_schema(
        {
            "query": string_field("Search query (see GitHub search syntax)"),
            "page": PAGE,
            "perPage": PER_PAGE,
        },
        ["query"],
    ),
)
@github_operation("search repositories")
async def search_repositories(
    client,
    query: str,
    page: Optional[int] = None,
    perPage: Optional[int] = None,
) -> Any:
    params: Dict[str, Any] = {"q": query, **pagination(page, perPage)}
    return await client.rest("/search/repositories", params=params)


@mcp_tool(
    "create_repository",
    "Create a new GitHub repository in your account",
    tool_input_schema(
        {
            "name": string_field("Repository name"),
            "description": string_field("Repository description"),
            "private": boolean_field("Whether the repository should be private"),
            "autoInit": boolean_field("Initialize with README.md"),
        },
        ["name"],
    ),
)
@github_operation("create repository")
async def create_repository(
    client,
    name: str,
    description: Optional[str] = None,
    private: Optional[bool] = None,
    autoInit: Optional[bool] = None,
) -> Any:
    payload: Dict[str, Any] = {"name": name}
    if description is not None:
        payload["description"] = description
    if private is not None:
        payload["private"] = private
    if autoInit is not None:
        payload["auto_init"] = autoInit

    return await client.rest("/user/repos", method="POST", body=payload)


@mcp_tool(
    "fork_repository",
    "Fork a GitHub repository to your account or specified organization",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "organization": string_field("Optional: organization to fork to (defaults to your personal account)"),
        },
        ["owner", "repo"],
    ),
)
@github_operation("fork repository")
async def fork_repository(client, owner: str, repo: str, organization: Optional[str] = None) -> Any:
    return await client.rest(
        repo_path(owner, repo, "/forks"),
        method="POST",
        params={"organization": organization},
    )
