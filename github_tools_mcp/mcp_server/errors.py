"""Tool-failure types and the single place GitHub errors become text.

Policy:
- Callers only ever see rendered text; the error class name never leaks.
- Argument validation failures are reported separately, field by field.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from github_tools_mcp.exceptions import (
    GitHubError,
    GitHubRateLimitError,
    GitHubValidationError,
)


class ToolInputValidationError(ValueError):
    """Raised when tool arguments fail contract validation."""

    def __init__(self, tool_name: str, violations: List[Dict[str, Any]]) -> None:
        self.tool_name = tool_name
        self.violations = list(violations)
        super().__init__(f"Invalid input: {json.dumps(self.violations)}")

    @property
    def fields(self) -> List[str]:
        return [v["field"] for v in self.violations]


class ToolCallError(Exception):
    """Transport-facing failure carrying only the rendered message."""


def render_github_error(exc: GitHubError) -> str:
    """Render a classified error as one line plus optional detail lines."""

    message = f"{exc.label}: {exc.message}"

    if isinstance(exc, GitHubValidationError) and exc.response:
        message += f"\nDetails: {json.dumps(exc.response, default=str)}"
    elif isinstance(exc, GitHubRateLimitError):
        message += f"\nResets at: {exc.reset_at.isoformat()}"

    return message


__all__ = [
    "ToolCallError",
    "ToolInputValidationError",
    "render_github_error",
]
