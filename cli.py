from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path


def _load_project_version(pyproject_path: Path | None = None) -> str:
    """Read the project version from pyproject.toml.

    This avoids importing the server (and registering every tool) just to
    answer ``--version``.
    """
    if pyproject_path is None:
        pyproject_path = Path(__file__).with_name("pyproject.toml")

    import tomllib

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return "0.0.0"
    except tomllib.TOMLDecodeError:
        return "0.0.0"

    project = data.get("project") or {}
    version = project.get("version")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return "0.0.0"


def _print_catalog() -> int:
    from github_tools_mcp.mcp_server.dispatcher import ToolDispatcher

    # Listing needs no credentials; the client only reads the token per request.
    catalog = ToolDispatcher().list_tools()
    print(json.dumps(catalog, indent=2))
    return 0


def _serve() -> int:
    from github_tools_mcp.server import run_stdio

    asyncio.run(run_stdio())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="github-tools-mcp",
        description="MCP server exposing GitHub repository, issue, pull request and project tools.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the server version and exit.",
    )
    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="Print the tool catalog (names, descriptions, input schemas) as JSON and exit.",
    )

    if argv is None:
        argv = sys.argv[1:]

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # Return the exit code when called as a library function.
        return int(getattr(exc, "code", 1) or 0)

    if args.version:
        print(_load_project_version())
        return 0

    if args.list_tools:
        return _print_catalog()

    return _serve()


if __name__ == "__main__":
    raise SystemExit(main())
