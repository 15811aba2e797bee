"""GitHub REST and GraphQL operations exposed as MCP tools.

Importing the package is cheap; the tool catalog is registered when
``github_tools_mcp.mcp_server.dispatcher`` (or ``tools_main``) is imported.
"""
