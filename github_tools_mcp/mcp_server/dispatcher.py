"""Tool dispatch: name lookup, contract validation, invocation, error rendering.

A tool event is logged for each phase of a call:
- event: tool_call.start | tool_call.ok | tool_call.error
- tool_name, call_id, duration_ms (for ok/error)
- arg_keys (argument values are never logged)

The structured payload travels as a compact JSON string under ``tool_json`` so
formatters never render nested dicts as Python repr.
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Any, Dict, List, Mapping, Optional

from github_tools_mcp.config import BASE_LOGGER, TOOLS_LOGGER
from github_tools_mcp.exceptions import GitHubError
from github_tools_mcp.http_clients import GitHubClient
from github_tools_mcp.mcp_server.errors import (
    ToolCallError,
    ToolInputValidationError,
    render_github_error,
)
from github_tools_mcp.mcp_server.registry import _find_registered_tool, registered_tools
from github_tools_mcp.mcp_server.schemas import validate_tool_args
from github_tools_mcp import tools_main  # noqa: F401

ToolResult = Dict[str, List[Dict[str, str]]]


def _log_tool_event(payload: Mapping[str, Any]) -> None:
    safe = dict(payload)
    tool = safe.get("tool_name", "")
    status = safe.get("status", "")
    dur = safe.get("duration_ms")
    dur_s = f" {int(dur)}ms" if isinstance(dur, (int, float)) else ""

    msg = f"[tool] {tool} {status}{dur_s} ({safe.get('event', 'tool')})"
    tool_json = json.dumps(safe, ensure_ascii=False, sort_keys=True, separators=(",", ":"), default=str)
    extra = {"event": "tool_json", "tool_json": tool_json, "tool_name": tool, "call_id": safe.get("call_id")}

    if status == "error":
        TOOLS_LOGGER.warning(msg, extra=extra)
    else:
        TOOLS_LOGGER.info(msg, extra=extra)


def text_result(result: Any) -> ToolResult:
    """Wrap an operation result in the single normalized success shape."""

    return {"content": [{"type": "text", "text": json.dumps(result, indent=2, ensure_ascii=False, default=str)}]}


class ToolDispatcher:
    """Maps ``(tool name, arguments)`` to a ``ToolResult`` or a ``ToolCallError``.

    The dispatcher holds no per-request state; concurrent calls only share the
    upstream client, which is itself stateless.
    """

    def __init__(self, client: Optional[GitHubClient] = None) -> None:
        self.client = client if client is not None else GitHubClient()

    def list_tools(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "inputSchema": spec.input_schema,
            }
            for spec in registered_tools()
        ]

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResult:
        if arguments is None:
            raise ToolCallError("Arguments are required")

        spec = _find_registered_tool(name)
        if spec is None:
            raise ToolCallError(f"Unknown tool: {name}")

        call_id = str(uuid.uuid4())
        start = time.perf_counter()
        keys = sorted(arguments.keys()) if isinstance(arguments, Mapping) else []
        _log_tool_event(
            {
                "event": "tool_call.start",
                "status": "start",
                "tool_name": name,
                "call_id": call_id,
                "arg_keys": keys[:32],
                "arg_count": len(keys),
            }
        )

        def _failed(phase: str, exc: BaseException) -> None:
            _log_tool_event(
                {
                    "event": "tool_call.error",
                    "status": "error",
                    "phase": phase,
                    "tool_name": name,
                    "call_id": call_id,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                    "error_type": exc.__class__.__name__,
                }
            )

        try:
            validated = validate_tool_args(name, spec.input_schema, arguments)
        except ToolInputValidationError as exc:
            _failed("validate", exc)
            raise ToolCallError(str(exc)) from exc

        try:
            result = await spec.handler(self.client, **validated)
        except GitHubError as exc:
            _failed("execute", exc)
            raise ToolCallError(render_github_error(exc)) from exc
        except Exception as exc:
            _failed("execute", exc)
            BASE_LOGGER.exception("Unexpected failure in tool %s", name)
            raise

        _log_tool_event(
            {
                "event": "tool_call.ok",
                "status": "ok",
                "tool_name": name,
                "call_id": call_id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
                "result_type": type(result).__name__,
            }
        )
        return text_result(result)


__all__ = ["ToolDispatcher", "ToolResult", "text_result"]
