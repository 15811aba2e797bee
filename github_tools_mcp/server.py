"""MCP server wiring over stdio.

The lowlevel ``Server`` only translates between MCP types and the dispatcher:
the dispatcher owns validation, so the SDK's own input validation is off.
A ``ToolCallError`` raised from ``call_tool`` is reported by the SDK as an
error result carrying the rendered message.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from github_tools_mcp.config import BASE_LOGGER, SERVER_NAME
from github_tools_mcp.mcp_server.dispatcher import ToolDispatcher

LOGGER = BASE_LOGGER.getChild("server")


def catalog_tools(dispatcher: ToolDispatcher) -> List[Tool]:
    return [
        Tool(
            name=entry["name"],
            description=entry["description"],
            inputSchema=entry["inputSchema"],
        )
        for entry in dispatcher.list_tools()
    ]


async def call_catalog_tool(
    dispatcher: ToolDispatcher,
    name: str,
    arguments: Optional[Dict[str, Any]],
) -> List[TextContent]:
    result = await dispatcher.call_tool(name, arguments)
    return [TextContent(type="text", text=item["text"]) for item in result["content"]]


def build_server(dispatcher: Optional[ToolDispatcher] = None) -> Server:
    dispatcher = dispatcher if dispatcher is not None else ToolDispatcher()
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return catalog_tools(dispatcher)

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        return await call_catalog_tool(dispatcher, name, arguments)

    return server


async def run_stdio(dispatcher: Optional[ToolDispatcher] = None) -> None:
    server = build_server(dispatcher)
    LOGGER.info("Serving %s over stdio", SERVER_NAME)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


__all__ = ["build_server", "call_catalog_tool", "catalog_tools", "run_stdio"]
