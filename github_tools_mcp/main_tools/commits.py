from __future__ import annotations

from typing import Any, Optional

from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import string_field, tool_input_schema

from ._shared import OWNER, PAGE, PER_PAGE, REPO, github_operation, pagination, repo_path


@mcp_tool(
    "list_commits",
    "Get list of commits of a branch in a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "sha": string_field("Branch name or commit SHA to start listing from"),
            "page": PAGE,
            "perPage": PER_PAGE,
        },
        ["owner", "repo"],
    ),
)
@github_operation("list commits")
async def list_commits(
    client,
    owner: str,
    repo: str,
    sha: Optional[str] = None,
    page: Optional[int] = None,
    perPage: Optional[int] = None,
) -> Any:
    params = {"sha": sha, **pagination(page, perPage)}
    return await client.rest(repo_path(owner, repo, "/commits"), params=params)
