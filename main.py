"""Entry point for the GitHub tools MCP server.

Run ``python main.py`` to serve the tool catalog over stdio. The server needs
``GITHUB_PERSONAL_ACCESS_TOKEN`` in the environment for every tool call; it
starts without one and reports an authentication failure on first use.
"""

from __future__ import annotations

from cli import main

if __name__ == "__main__":
    raise SystemExit(main())
