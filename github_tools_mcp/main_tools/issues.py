"""Issue tools.

``delete_issue`` is the one composite operation here: the delete mutation is
GraphQL-only and needs the issue's node id, which only the REST issue payload
carries. The two steps are not transactional.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from github_tools_mcp.exceptions import GitHubNotFoundError
from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import (
    array_field,
    enum_field,
    integer_field,
    string_field,
    tool_input_schema,
)

from ._shared import OWNER, PAGE, PER_PAGE, REPO, github_operation, repo_path

ISSUE_NUMBER = integer_field("Issue number")
STRING_LIST = {"type": "string"}

DELETE_ISSUE_MUTATION = """
mutation DeleteIssue($issueId: ID!) {
  deleteIssue(input: { issueId: $issueId }) {
    clientMutationId
    repository {
      id
      name
    }
  }
}
"""


@dataclass(frozen=True)
class ResolvedIssueHandle:
    """An issue number resolved to its GraphQL node id."""

    number: int
    node_id: str


@mcp_tool(
    "get_issue",
    "Get details of a specific issue in a GitHub repository.",
    tool_input_schema({"owner": OWNER, "repo": REPO, "issue_number": ISSUE_NUMBER}, ["owner", "repo", "issue_number"]),
)
@github_operation("get issue")
async def get_issue(client, owner: str, repo: str, issue_number: int) -> Any:
    return await client.rest(repo_path(owner, repo, f"/issues/{issue_number}"))


@mcp_tool(
    "list_issues",
    "List issues in a GitHub repository with filtering options",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "direction": enum_field(["asc", "desc"]),
            "labels": array_field(STRING_LIST),
            "page": PAGE,
            "per_page": PER_PAGE,
            "since": string_field("Only issues updated at or after this ISO-8601 timestamp"),
            "sort": enum_field(["created", "updated", "comments"]),
            "state": enum_field(["open", "closed", "all"]),
        },
        ["owner", "repo"],
    ),
)
@github_operation("list issues")
async def list_issues(
    client,
    owner: str,
    repo: str,
    direction: Optional[str] = None,
    labels: Optional[List[str]] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    since: Optional[str] = None,
    sort: Optional[str] = None,
    state: Optional[str] = None,
) -> Any:
    params: Dict[str, Any] = {
        "direction": direction,
        "labels": ",".join(labels) if labels else None,
        "page": page,
        "per_page": per_page,
        "since": since,
        "sort": sort,
        "state": state,
    }
    return await client.rest(repo_path(owner, repo, "/issues"), params=params)


@mcp_tool(
    "create_issue",
    "Create a new issue in a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "title": string_field(),
            "body": string_field(),
            "assignees": array_field(STRING_LIST),
            "milestone": integer_field(),
            "labels": array_field(STRING_LIST),
        },
        ["owner", "repo", "title"],
    ),
)
@github_operation("create issue")
async def create_issue(
    client,
    owner: str,
    repo: str,
    title: str,
    body: Optional[str] = None,
    assignees: Optional[List[str]] = None,
    milestone: Optional[int] = None,
    labels: Optional[List[str]] = None,
) -> Any:
    payload: Dict[str, Any] = {"title": title}
    if body is not None:
        payload["body"] = body
    if assignees is not None:
        payload["assignees"] = assignees
    if milestone is not None:
        payload["milestone"] = milestone
    if labels is not None:
        payload["labels"] = labels

    return await client.rest(repo_path(owner, repo, "/issues"), method="POST", body=payload)


@mcp_tool(
    "update_issue",
    "Update an existing issue in a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "issue_number": ISSUE_NUMBER,
            "title": string_field(),
            "body": string_field(),
            "assignees": array_field(STRING_LIST),
            "milestone": integer_field(),
            "labels": array_field(STRING_LIST),
            "state": enum_field(["open", "closed"]),
        },
        ["owner", "repo", "issue_number"],
    ),
)
@github_operation("update issue")
async def update_issue(
    client,
    owner: str,
    repo: str,
    issue_number: int,
    title: Optional[str] = None,
    body: Optional[str] = None,
    assignees: Optional[List[str]] = None,
    milestone: Optional[int] = None,
    labels: Optional[List[str]] = None,
    state: Optional[str] = None,
) -> Any:
    payload: Dict[str, Any] = {}
    for key, value in (
        ("title", title),
        ("body", body),
        ("assignees", assignees),
        ("milestone", milestone),
        ("labels", labels),
        ("state", state),
    ):
        if value is not None:
            payload[key] = value

    return await client.rest(
        repo_path(owner, repo, f"/issues/{issue_number}"),
        method="PATCH",
        body=payload,
    )


@mcp_tool(
    "add_issue_comment",
    "Add a comment to an existing issue",
    tool_input_schema(
        {"owner": OWNER, "repo": REPO, "issue_number": ISSUE_NUMBER, "body": string_field()},
        ["owner", "repo", "issue_number", "body"],
    ),
)
@github_operation("add issue comment")
async def add_issue_comment(client, owner: str, repo: str, issue_number: int, body: str) -> Any:
    return await client.rest(
        repo_path(owner, repo, f"/issues/{issue_number}/comments"),
        method="POST",
        body={"body": body},
    )


async def resolve_issue_handle(client, owner: str, repo: str, issue_number: int) -> ResolvedIssueHandle:
    """Look up an issue by number and return its node id."""

    issue = await client.rest(repo_path(owner, repo, f"/issues/{issue_number}"))
    node_id = issue.get("node_id") if isinstance(issue, dict) else None
    if not node_id:
        raise GitHubNotFoundError(
            f"Issue #{issue_number} not found or cannot be accessed",
            404,
            {"issue_number": issue_number, "repository": f"{owner}/{repo}"},
        )
    return ResolvedIssueHandle(number=issue_number, node_id=str(node_id))


@mcp_tool(
    "delete_issue",
    "Delete an issue from a GitHub repository using GraphQL API",
    tool_input_schema({"owner": OWNER, "repo": REPO, "issue_number": ISSUE_NUMBER}, ["owner", "repo", "issue_number"]),
)
@github_operation("delete issue")
async def delete_issue(client, owner: str, repo: str, issue_number: int) -> Dict[str, Any]:
    handle = await resolve_issue_handle(client, owner, repo, issue_number)

    # No compensation if this step fails; re-running resolves the same node id.
    data = await client.graphql(DELETE_ISSUE_MUTATION, {"issueId": handle.node_id})
    deleted = (data or {}).get("deleteIssue") or {}

    return {
        "success": True,
        "issue_number": issue_number,
        "repository": f"{owner}/{repo}",
        **deleted,
    }
