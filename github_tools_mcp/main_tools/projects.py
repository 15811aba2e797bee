"""Classic (repository and organization) project boards.

Every call here sends the ``inertia`` preview media type. Projects are
addressed two ways: by their per-repository ``number`` (what users see in the
UI) and by their global ``id`` (what the column endpoints take). Resolving a
number means listing the repository's projects and scanning for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from github_tools_mcp.config import GITHUB_PROJECTS_PREVIEW_ACCEPT
from github_tools_mcp.exceptions import GitHubNotFoundError, GitHubValidationError
from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import enum_field, integer_field, string_field, tool_input_schema

from ._shared import OWNER, PAGE, PER_PAGE, REPO, github_operation, pagination, repo_path

PREVIEW_HEADERS = {"Accept": GITHUB_PROJECTS_PREVIEW_ACCEPT}

PROJECT_NUMBER = integer_field("The project number")
PROJECT_ID = integer_field("The unique identifier of the project")
COLUMN_ID = integer_field("The unique identifier of the column")
CARD_ID = integer_field("The unique identifier of the card")
PROJECT_STATE = enum_field(["open", "closed", "all"], "Filter projects by state")

CARD_POSITION = string_field(
    "The position of the card (top, bottom, or after:<card_id>)",
    pattern=r"^(top|bottom|after:\d+)$",
)


@dataclass(frozen=True)
class ResolvedProject:
    """A project number resolved to the project's global id."""

    number: int
    project_id: int


# Lookups by number scan one page of every state; repositories with more
# than 100 classic projects are not searched past the first page.
PROJECT_SCAN_PARAMS = {"state": "all", "per_page": 100}


async def _preview(client, path: str, *, method: str = "GET", params=None, body=None) -> Any:
    return await client.rest(path, method=method, params=params, body=body, headers=PREVIEW_HEADERS)


async def _find_project(client, owner: str, repo: str, project_number: int) -> Dict[str, Any]:
    projects = await _preview(
        client, repo_path(owner, repo, "/projects"), params=PROJECT_SCAN_PARAMS
    )
    for project in projects or []:
        if isinstance(project, dict) and project.get("number") == project_number:
            return project
    raise GitHubNotFoundError(
        f"Project with number {project_number} not found",
        404,
        {"message": f"Project {project_number} not found"},
    )


async def resolve_project(client, owner: str, repo: str, project_number: int) -> ResolvedProject:
    project = await _find_project(client, owner, repo, project_number)
    return ResolvedProject(number=project_number, project_id=project["id"])


@mcp_tool(
    "create_project",
    "Create a new project in a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "name": string_field("Name of the project"),
            "body": string_field("Description of the project"),
        },
        ["owner", "repo", "name"],
    ),
)
@github_operation("create project")
async def create_project(client, owner: str, repo: str, name: str, body: Optional[str] = None) -> Any:
    return await _preview(
        client,
        repo_path(owner, repo, "/projects"),
        method="POST",
        body={"name": name, "body": body or ""},
    )


@mcp_tool(
    "get_project",
    "Get details about a specific project",
    tool_input_schema(
        {"owner": OWNER, "repo": REPO, "project_number": PROJECT_NUMBER},
        ["owner", "repo", "project_number"],
    ),
)
@github_operation("get project")
async def get_project(client, owner: str, repo: str, project_number: int) -> Any:
    return await _find_project(client, owner, repo, project_number)


@mcp_tool(
    "update_project",
    "Update an existing project's details",
    tool_input_schema(
        {
            "project_id": PROJECT_ID,
            "name": string_field("New name of the project"),
            "body": string_field("New description of the project"),
            "state": enum_field(["open", "closed"], "State of the project"),
        },
        ["project_id"],
    ),
)
@github_operation("update project")
async def update_project(
    client,
    project_id: int,
    name: Optional[str] = None,
    body: Optional[str] = None,
    state: Optional[str] = None,
) -> Any:
    payload = {k: v for k, v in (("name", name), ("body", body), ("state", state)) if v is not None}
    return await _preview(client, f"/projects/{project_id}", method="PATCH", body=payload)


@mcp_tool(
    "list_projects",
    "List all projects in a GitHub repository",
    tool_input_schema(
        {"owner": OWNER, "repo": REPO, "state": PROJECT_STATE, "page": PAGE, "per_page": PER_PAGE},
        ["owner", "repo"],
    ),
)
@github_operation("list projects")
async def list_projects(
    client,
    owner: str,
    repo: str,
    state: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    params = {"state": state, **pagination(page, per_page)}
    return await _preview(client, repo_path(owner, repo, "/projects"), params=params)


@mcp_tool(
    "create_project_column",
    "Create a new column in a project",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "project_number": PROJECT_NUMBER,
            "name": string_field("Name of the column"),
        },
        ["owner", "repo", "project_number", "name"],
    ),
)
@github_operation("create project column")
async def create_project_column(client, owner: str, repo: str, project_number: int, name: str) -> Any:
    project = await resolve_project(client, owner, repo, project_number)
    return await _preview(
        client,
        f"/projects/{project.project_id}/columns",
        method="POST",
        body={"name": name},
    )


@mcp_tool(
    "list_project_columns",
    "List all columns in a project",
    tool_input_schema(
        {"project_id": PROJECT_ID, "page": PAGE, "per_page": PER_PAGE},
        ["project_id"],
    ),
)
@github_operation("list project columns")
async def list_project_columns(
    client,
    project_id: int,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    return await _preview(client, f"/projects/{project_id}/columns", params=pagination(page, per_page))


@mcp_tool(
    "update_project_column",
    "Update an existing project column",
    tool_input_schema(
        {"column_id": COLUMN_ID, "name": string_field("New name of the column")},
        ["column_id", "name"],
    ),
)
@github_operation("update project column")
async def update_project_column(client, column_id: int, name: str) -> Any:
    return await _preview(client, f"/projects/columns/{column_id}", method="PATCH", body={"name": name})


@mcp_tool(
    "delete_project_column",
    "Delete a project column",
    tool_input_schema({"column_id": COLUMN_ID}, ["column_id"]),
)
@github_operation("delete project column")
async def delete_project_column(client, column_id: int) -> Dict[str, Any]:
    await _preview(client, f"/projects/columns/{column_id}", method="DELETE")
    return {"success": True}


def card_payload(content_type: str, content_id: Optional[int], note: Optional[str]) -> Dict[str, Any]:
    """Build the card body, checking the fields each content type needs."""

    if content_type == "Note":
        if not note:
            raise GitHubValidationError(
                "Note content is required when content_type is Note",
                400,
                {"message": "Missing note content"},
            )
        return {"note": note}

    if not content_id:
        raise GitHubValidationError(
            "Content ID is required when content_type is Issue or PullRequest",
            400,
            {"message": "Missing content ID"},
        )
    return {"content_id": content_id, "content_type": content_type.lower()}


@mcp_tool(
    "add_card_to_column",
    "Add a new card to a project column",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "column_id": string_field("The ID of the column to add card to"),
            "content_type": enum_field(["Issue", "PullRequest", "Note"], "Type of content for the card"),
            "content_id": integer_field(
                "ID of the issue or pull request (required if content_type is Issue or PullRequest)"
            ),
            "note": string_field("The note content for the card (required if content_type is Note)"),
        },
        ["owner", "repo", "column_id", "content_type"],
    ),
)
@github_operation("add card to column")
async def add_card_to_column(
    client,
    owner: str,
    repo: str,
    column_id: str,
    content_type: str,
    content_id: Optional[int] = None,
    note: Optional[str] = None,
) -> Any:
    payload = card_payload(content_type, content_id, note)
    return await _preview(client, f"/projects/columns/{column_id}/cards", method="POST", body=payload)


@mcp_tool(
    "list_column_cards",
    "List all cards in a project column",
    tool_input_schema(
        {
            "column_id": COLUMN_ID,
            "archived_state": enum_field(["all", "archived", "not_archived"], "Filter by card archived state"),
            "page": PAGE,
            "per_page": PER_PAGE,
        },
        ["column_id"],
    ),
)
@github_operation("list column cards")
async def list_column_cards(
    client,
    column_id: int,
    archived_state: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    params = {"archived_state": archived_state, **pagination(page, per_page)}
    return await _preview(client, f"/projects/columns/{column_id}/cards", params=params)


@mcp_tool(
    "move_card",
    "Move a card to a different position or column",
    tool_input_schema(
        {
            "card_id": CARD_ID,
            "position": CARD_POSITION,
            "column_id": integer_field("The column ID to move the card to"),
        },
        ["card_id", "position"],
    ),
)
@github_operation("move card")
async def move_card(client, card_id: int, position: str, column_id: Optional[int] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"position": position}
    if column_id:
        payload["column_id"] = column_id

    await _preview(client, f"/projects/columns/cards/{card_id}/moves", method="POST", body=payload)
    return {"success": True}


@mcp_tool(
    "delete_card",
    "Delete a card from a project",
    tool_input_schema({"card_id": CARD_ID}, ["card_id"]),
)
@github_operation("delete card")
async def delete_card(client, card_id: int) -> Dict[str, Any]:
    await _preview(client, f"/projects/columns/cards/{card_id}", method="DELETE")
    return {"success": True}


@mcp_tool(
    "list_organization_projects",
    "List all projects in a GitHub organization (at organization level, not repository level)",
    tool_input_schema(
        {
            "org": string_field("Organization name"),
            "state": PROJECT_STATE,
            "page": PAGE,
            "per_page": PER_PAGE,
        },
        ["org"],
    ),
)
@github_operation("list organization projects")
async def list_organization_projects(
    client,
    org: str,
    state: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    params = {"state": state, **pagination(page, per_page)}
    return await _preview(client, f"/orgs/{org}/projects", params=params)
