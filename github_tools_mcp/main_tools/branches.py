from __future__ import annotations

from typing import Any, Optional

from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import string_field, tool_input_schema

from ._shared import OWNER, REPO, github_operation, repo_path


async def _branch_sha(client, owner: str, repo: str, branch: str) -> str:
    ref = await client.rest(repo_path(owner, repo, f"/git/refs/heads/{branch}"))
    return ref["object"]["sha"]


async def _default_branch(client, owner: str, repo: str) -> str:
    repository = await client.rest(repo_path(owner, repo))
    return repository["default_branch"]


@mcp_tool(
    "create_branch",
    "Create a new branch in a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "branch": string_field("Name for the new branch"),
            "from_branch": string_field(
                "Optional: source branch to create from (defaults to the repository's default branch)"
            ),
        },
        ["owner", "repo", "branch"],
    ),
)
@github_operation("create branch")
async def create_branch(
    client,
    owner: str,
    repo: str,
    branch: str,
    from_branch: Optional[str] = None,
) -> Any:
    source = from_branch or await _default_branch(client, owner, repo)
    sha = await _branch_sha(client, owner, repo, source)

    return await client.rest(
        repo_path(owner, repo, "/git/refs"),
        method="POST",
        body={"ref": f"refs/heads/{branch}", "sha": sha},
    )
