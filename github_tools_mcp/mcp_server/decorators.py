"""Decorator utilities for MCP tool registration.

``@mcp_tool`` binds a tool name, a one-line description and its input contract
to an async handler. Registration happens at import time and refuses handlers
whose contract is missing, malformed or out of step with the handler's
signature, so a tool without a usable contract never reaches the catalog.

Handlers take the upstream client as their first positional parameter
(``client``); every other parameter must appear in the contract.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping

from github_tools_mcp.mcp_server.registry import ToolSpec, _register_tool
from github_tools_mcp.mcp_server.schemas import check_tool_schema

CLIENT_PARAMETER = "client"


def _check_signature(name: str, func: Callable[..., Any], schema: Mapping[str, Any]) -> None:
    signature = inspect.signature(func)
    params = list(signature.parameters.values())
    if not params or params[0].name != CLIENT_PARAMETER:
        raise TypeError(f"Tool {name!r}: first parameter must be {CLIENT_PARAMETER!r}")

    arg_params = {p.name: p for p in params[1:]}
    properties = set((schema.get("properties") or {}).keys())
    required = set(schema.get("required") or ())

    missing_in_schema = sorted(set(arg_params) - properties)
    missing_in_handler = sorted(properties - set(arg_params))
    if missing_in_schema or missing_in_handler:
        raise TypeError(
            f"Tool {name!r}: contract/handler mismatch "
            f"(not in contract: {missing_in_schema}, not in handler: {missing_in_handler})"
        )

    for param_name, param in arg_params.items():
        if param.default is inspect.Parameter.empty and param_name not in required:
            raise TypeError(
                f"Tool {name!r}: parameter {param_name!r} has no default but is optional in the contract"
            )


def mcp_tool(
    name: str,
    description: str,
    schema: Mapping[str, Any],
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register an async function as an MCP tool."""

    check_tool_schema(schema)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"Tool {name!r} must be an async function")
        _check_signature(name, func, schema)

        _register_tool(
            ToolSpec(
                name=name,
                description=description,
                input_schema=schema,
                handler=func,
            )
        )
        func.__mcp_tool_name__ = name
        func.__mcp_input_schema__ = schema
        return func

    return decorator


__all__ = ["CLIENT_PARAMETER", "mcp_tool"]
