from __future__ import annotations

from typing import Any, Dict, List, Optional

from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import (
    array_field,
    boolean_field,
    enum_field,
    integer_field,
    object_schema,
    string_field,
    tool_input_schema,
)

from ._shared import OWNER, PAGE, PER_PAGE, REPO, github_operation, pagination, repo_path

PULL_NUMBER = integer_field("Pull request number")

_PR_ARGS = {"owner": OWNER, "repo": REPO, "pull_number": PULL_NUMBER}
_PR_REQUIRED = ["owner", "repo", "pull_number"]


def _pull_path(owner: str, repo: str, pull_number: int, suffix: str = "") -> str:
    return repo_path(owner, repo, f"/pulls/{pull_number}{suffix}")


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


@mcp_tool(
    "create_pull_request",
    "Create a new pull request in a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "title": string_field("Pull request title"),
            "body": string_field("Pull request body/description"),
            "head": string_field("The name of the branch where your changes are implemented"),
            "base": string_field("The name of the branch you want the changes pulled into"),
            "draft": boolean_field("Whether to create the pull request as a draft"),
            "maintainer_can_modify": boolean_field("Whether maintainers can modify the pull request"),
        },
        ["owner", "repo", "title", "head", "base"],
    ),
)
@github_operation("create pull request")
async def create_pull_request(
    client,
    owner: str,
    repo: str,
    title: str,
    head: str,
    base: str,
    body: Optional[str] = None,
    draft: Optional[bool] = None,
    maintainer_can_modify: Optional[bool] = None,
) -> Any:
    payload = _drop_none(
        {
            "title": title,
            "body": body,
            "head": head,
            "base": base,
            "draft": draft,
            "maintainer_can_modify": maintainer_can_modify,
        }
    )
    return await client.rest(repo_path(owner, repo, "/pulls"), method="POST", body=payload)


@mcp_tool(
    "get_pull_request",
    "Get details of a specific pull request",
    tool_input_schema(_PR_ARGS, _PR_REQUIRED),
)
@github_operation("get pull request")
async def get_pull_request(client, owner: str, repo: str, pull_number: int) -> Any:
    return await client.rest(_pull_path(owner, repo, pull_number))


@mcp_tool(
    "list_pull_requests",
    "List and filter repository pull requests",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "state": enum_field(["open", "closed", "all"], "State of the pull requests to return"),
            "head": string_field("Filter by head user or head organization and branch name"),
            "base": string_field("Filter by base branch name"),
            "sort": enum_field(["created", "updated", "popularity", "long-running"], "What to sort results by"),
            "direction": enum_field(["asc", "desc"], "The direction of the sort"),
            "per_page": PER_PAGE,
            "page": PAGE,
        },
        ["owner", "repo"],
    ),
)
@github_operation("list pull requests")
async def list_pull_requests(
    client,
    owner: str,
    repo: str,
    state: Optional[str] = None,
    head: Optional[str] = None,
    base: Optional[str] = None,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    per_page: Optional[int] = None,
    page: Optional[int] = None,
) -> Any:
    params = {
        "state": state,
        "head": head,
        "base": base,
        "sort": sort,
        "direction": direction,
        **pagination(page, per_page),
    }
    return await client.rest(repo_path(owner, repo, "/pulls"), params=params)


REVIEW_COMMENT = object_schema(
    {
        "path": string_field("The relative path to the file being commented on"),
        "position": integer_field("The position in the diff where you want to add a review comment"),
        "body": string_field("Text of the review comment"),
    },
    ["path", "position", "body"],
)


@mcp_tool(
    "create_pull_request_review",
    "Create a review on a pull request",
    tool_input_schema(
        {
            **_PR_ARGS,
            "commit_id": string_field("The SHA of the commit that needs a review"),
            "body": string_field("The body text of the review"),
            "event": enum_field(["APPROVE", "REQUEST_CHANGES", "COMMENT"], "The review action to perform"),
            "comments": array_field(REVIEW_COMMENT, "Comments to post as part of the review"),
        },
        _PR_REQUIRED + ["body", "event"],
    ),
)
@github_operation("create pull request review")
async def create_pull_request_review(
    client,
    owner: str,
    repo: str,
    pull_number: int,
    body: str,
    event: str,
    commit_id: Optional[str] = None,
    comments: Optional[List[Dict[str, Any]]] = None,
) -> Any:
    payload = _drop_none({"commit_id": commit_id, "body": body, "event": event, "comments": comments})
    return await client.rest(
        _pull_path(owner, repo, pull_number, "/reviews"),
        method="POST",
        body=payload,
    )


@mcp_tool(
    "merge_pull_request",
    "Merge a pull request",
    tool_input_schema(
        {
            **_PR_ARGS,
            "commit_title": string_field("Title for the automatic commit message"),
            "commit_message": string_field("Extra detail to append to automatic commit message"),
            "merge_method": enum_field(["merge", "squash", "rebase"], "Merge method to use"),
        },
        _PR_REQUIRED,
    ),
)
@github_operation("merge pull request")
async def merge_pull_request(
    client,
    owner: str,
    repo: str,
    pull_number: int,
    commit_title: Optional[str] = None,
    commit_message: Optional[str] = None,
    merge_method: Optional[str] = None,
) -> Any:
    payload = _drop_none(
        {
            "commit_title": commit_title,
            "commit_message": commit_message,
            "merge_method": merge_method,
        }
    )
    return await client.rest(
        _pull_path(owner, repo, pull_number, "/merge"),
        method="PUT",
        body=payload,
    )


@mcp_tool(
    "get_pull_request_files",
    "Get the list of files changed in a pull request",
    tool_input_schema(_PR_ARGS, _PR_REQUIRED),
)
@github_operation("get pull request files")
async def get_pull_request_files(client, owner: str, repo: str, pull_number: int) -> Any:
    return await client.rest(_pull_path(owner, repo, pull_number, "/files"))


@mcp_tool(
    "get_pull_request_status",
    "Get the combined status of all status checks for a pull request",
    tool_input_schema(_PR_ARGS, _PR_REQUIRED),
)
@github_operation("get pull request status")
async def get_pull_request_status(client, owner: str, repo: str, pull_number: int) -> Any:
    pr = await client.rest(_pull_path(owner, repo, pull_number))
    head_sha = pr["head"]["sha"]
    return await client.rest(repo_path(owner, repo, f"/commits/{head_sha}/status"))


@mcp_tool(
    "update_pull_request_branch",
    "Update a pull request branch with the latest changes from the base branch",
    tool_input_schema(
        {
            **_PR_ARGS,
            "expected_head_sha": string_field(
                "The expected SHA of the pull request's HEAD ref; the update fails if it does not match"
            ),
        },
        _PR_REQUIRED,
    ),
)
@github_operation("update pull request branch")
async def update_pull_request_branch(
    client,
    owner: str,
    repo: str,
    pull_number: int,
    expected_head_sha: Optional[str] = None,
) -> Dict[str, Any]:
    await client.rest(
        _pull_path(owner, repo, pull_number, "/update-branch"),
        method="PUT",
        body=_drop_none({"expected_head_sha": expected_head_sha}),
    )
    return {"success": True}


@mcp_tool(
    "get_pull_request_comments",
    "Get the review comments on a pull request",
    tool_input_schema(_PR_ARGS, _PR_REQUIRED),
)
@github_operation("get pull request comments")
async def get_pull_request_comments(client, owner: str, repo: str, pull_number: int) -> Any:
    return await client.rest(_pull_path(owner, repo, pull_number, "/comments"))


@mcp_tool(
    "get_pull_request_reviews",
    "Get the reviews on a pull request",
    tool_input_schema(_PR_ARGS, _PR_REQUIRED),
)
@github_operation("get pull request reviews")
async def get_pull_request_reviews(client, owner: str, repo: str, pull_number: int) -> Any:
    return await client.rest(_pull_path(owner, repo, pull_number, "/reviews"))
