from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: Mapping[str, Any]
    handler: Callable[..., Awaitable[Any]]


_REGISTERED_MCP_TOOLS: Dict[str, ToolSpec] = {}


def _register_tool(spec: ToolSpec) -> None:
    existing = _REGISTERED_MCP_TOOLS.get(spec.name)
    if existing is not None and existing.handler is not spec.handler:
        raise ValueError(f"Tool {spec.name!r} is already registered")
    _REGISTERED_MCP_TOOLS[spec.name] = spec


def _find_registered_tool(tool_name: str) -> Optional[ToolSpec]:
    return _REGISTERED_MCP_TOOLS.get(tool_name)


def registered_tools() -> List[ToolSpec]:
    """Registered tools in registration order."""
    return list(_REGISTERED_MCP_TOOLS.values())
