"""File contents and multi-file commits.

``push_files`` goes through the git data API: it reads the branch ref, builds
a tree on top of the ref's commit, commits it and moves the ref. The four
calls are sequential and not atomic; a failure part-way leaves orphaned trees
or commits that nothing references.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, List, Mapping, Optional

from github_tools_mcp.config import TOOLS_LOGGER
from github_tools_mcp.exceptions import GitHubNotFoundError
from github_tools_mcp.mcp_server.decorators import mcp_tool
from github_tools_mcp.mcp_server.schemas import (
    array_field,
    object_schema,
    string_field,
    tool_input_schema,
)

from ._shared import OWNER, REPO, github_operation, repo_path

FILE_MODE = "100644"

PATH = string_field("Path to the file or directory")
BRANCH = string_field("Branch name")


def _contents_path(owner: str, repo: str, path: str) -> str:
    return repo_path(owner, repo, "/contents/" + path.lstrip("/"))


def _decode_file_content(entry: Dict[str, Any]) -> Dict[str, Any]:
    if entry.get("encoding") != "base64" or not isinstance(entry.get("content"), str):
        return entry
    raw = entry["content"].replace("\n", "")
    try:
        decoded = base64.b64decode(raw).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        # Binary files keep their encoded payload.
        return entry
    return {**entry, "content": decoded}


@mcp_tool(
    "get_file_contents",
    "Get the contents of a file or directory from a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "path": PATH,
            "branch": string_field("Branch to get contents from"),
        },
        ["owner", "repo", "path"],
    ),
)
@github_operation("get file contents")
async def get_file_contents(
    client,
    owner: str,
    repo: str,
    path: str,
    branch: Optional[str] = None,
) -> Any:
    data = await client.rest(_contents_path(owner, repo, path), params={"ref": branch})

    # Directories come back as a list of entries.
    if isinstance(data, dict):
        return _decode_file_content(data)
    return data


async def _existing_file_sha(client, owner: str, repo: str, path: str, branch: str) -> Optional[str]:
    try:
        existing = await client.rest(_contents_path(owner, repo, path), params={"ref": branch})
    except GitHubNotFoundError:
        return None
    if isinstance(existing, dict):
        return existing.get("sha")
    return None


@mcp_tool(
    "create_or_update_file",
    "Create or update a single file in a GitHub repository",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "path": string_field("Path where to create/update the file"),
            "content": string_field("Content of the file"),
            "message": string_field("Commit message"),
            "branch": string_field("Branch to create/update the file in"),
            "sha": string_field("SHA of the file being replaced (required when updating existing files)"),
        },
        ["owner", "repo", "path", "content", "message", "branch"],
    ),
)
@github_operation("create or update file")
async def create_or_update_file(
    client,
    owner: str,
    repo: str,
    path: str,
    content: str,
    message: str,
    branch: str,
    sha: Optional[str] = None,
) -> Any:
    current_sha = sha
    if current_sha is None:
        current_sha = await _existing_file_sha(client, owner, repo, path, branch)

    payload: Dict[str, Any] = {
        "message": message,
        "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        "branch": branch,
    }
    if current_sha:
        payload["sha"] = current_sha

    return await client.rest(_contents_path(owner, repo, path), method="PUT", body=payload)


def _tree_items(files: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "path": f["path"],
            "mode": FILE_MODE,
            "type": "blob",
            "content": f["content"],
        }
        for f in files
    ]


@mcp_tool(
    "push_files",
    "Push multiple files to a GitHub repository in a single commit",
    tool_input_schema(
        {
            "owner": OWNER,
            "repo": REPO,
            "branch": string_field("Branch to push to (e.g., 'main' or 'master')"),
            "files": array_field(
                object_schema(
                    {"path": string_field(), "content": string_field()},
                    ["path", "content"],
                ),
                "Array of files to push",
            ),
            "message": string_field("Commit message"),
        },
        ["owner", "repo", "branch", "files", "message"],
    ),
)
@github_operation("push files")
async def push_files(
    client,
    owner: str,
    repo: str,
    branch: str,
    files: List[Dict[str, Any]],
    message: str,
) -> Any:
    ref_path = repo_path(owner, repo, f"/git/refs/heads/{branch}")

    ref = await client.rest(ref_path)
    parent_sha = ref["object"]["sha"]

    tree = await client.rest(
        repo_path(owner, repo, "/git/trees"),
        method="POST",
        body={"base_tree": parent_sha, "tree": _tree_items(files)},
    )
    commit = await client.rest(
        repo_path(owner, repo, "/git/commits"),
        method="POST",
        body={"message": message, "tree": tree["sha"], "parents": [parent_sha]},
    )
    TOOLS_LOGGER.detailed(
        "Committed %d file(s) to %s/%s@%s as %s",
        len(files),
        owner,
        repo,
        branch,
        commit["sha"],
    )

    return await client.rest(
        ref_path,
        method="PATCH",
        body={"sha": commit["sha"], "force": True},
    )
