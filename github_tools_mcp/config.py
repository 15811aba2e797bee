"""Configuration and logging helpers for the GitHub tools MCP server."""

from __future__ import annotations

import logging
import os

# Custom log levels
# ------------------------------------------------------------------------------
#
# DETAILED: verbose operational logging that is more detailed than INFO but less
# noisy than full DEBUG (one line per upstream request, tool payload previews).

DETAILED_LEVEL = 15


def _install_custom_log_levels() -> None:
    if not hasattr(logging, "DETAILED"):
        logging.addLevelName(DETAILED_LEVEL, "DETAILED")
        setattr(logging, "DETAILED", DETAILED_LEVEL)

    if not hasattr(logging.Logger, "detailed"):
        def detailed(self: logging.Logger, msg, *args, **kwargs):
            if self.isEnabledFor(DETAILED_LEVEL):
                self._log(DETAILED_LEVEL, msg, args, **kwargs)
        logging.Logger.detailed = detailed  # type: ignore[attr-defined]


def _resolve_log_level(level_name: str | None) -> int:
    if not level_name:
        return logging.INFO

    name = str(level_name).strip().upper()
    if not name:
        return logging.INFO

    # Numeric levels are allowed.
    if name.lstrip("-").isdigit():
        return int(name)

    if name == "DETAILED":
        return DETAILED_LEVEL

    level = getattr(logging, name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _optional_float(name: str) -> float | None:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


_install_custom_log_levels()

# Configuration and globals
# ------------------------------------------------------------------------------

# Checked in order; the first variable that is set wins. The value is read on
# every outbound call, never cached here.
GITHUB_TOKEN_ENV_VARS = ("GITHUB_PERSONAL_ACCESS_TOKEN",)

GITHUB_API_BASE = os.environ.get("GITHUB_API_BASE", "https://api.github.com").rstrip("/")
GITHUB_GRAPHQL_URL = os.environ.get("GITHUB_GRAPHQL_URL", f"{GITHUB_API_BASE}/graphql")
GITHUB_API_VERSION = os.environ.get("GITHUB_API_VERSION", "2022-11-28")

GITHUB_ACCEPT = "application/vnd.github+json"
# Classic (v1) project endpoints still require the inertia preview media type.
GITHUB_PROJECTS_PREVIEW_ACCEPT = "application/vnd.github.inertia-preview+json"

SERVER_NAME = "github-tools-mcp"
USER_AGENT = os.environ.get("GITHUB_USER_AGENT", SERVER_NAME)

# None keeps the httpx default timeout.
HTTPX_TIMEOUT = _optional_float("HTTPX_TIMEOUT")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_STYLE = os.environ.get("LOG_STYLE", "plain").lower()

LOG_FORMAT = os.environ.get(
    "LOG_FORMAT",
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


_LEVEL_COLORS = {
    logging.DEBUG: "\x1b[36m",
    DETAILED_LEVEL: "\x1b[36m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[35m",
}
_RESET = "\x1b[0m"


class _ColorFormatter(logging.Formatter):
    """Colors the level name when LOG_STYLE asks for it; plain otherwise."""

    def __init__(self, fmt: str, *, use_color: bool) -> None:
        super().__init__(fmt)
        self._use_color = bool(use_color)

    def formatMessage(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting
        color = _LEVEL_COLORS.get(record.levelno) if self._use_color else None
        if color is None:
            return super().formatMessage(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{_RESET}"
        return super().formatMessage(colored)


def _configure_logging() -> None:
    # Avoid reconfiguring during module reloads.
    root = logging.getLogger()
    if getattr(root, "_github_tools_mcp_configured", False):
        return

    use_color = LOG_STYLE in {"color", "ansi", "colored"}

    # stdout carries the stdio protocol stream, so logs always go to stderr.
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_ColorFormatter(LOG_FORMAT, use_color=use_color))

    logging.basicConfig(
        level=_resolve_log_level(LOG_LEVEL),
        handlers=[console_handler],
        force=True,
    )

    for noisy in (
        "mcp",
        "mcp.server",
        "mcp.server.lowlevel.server",
        "httpx",
        "httpcore",
    ):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    setattr(root, "_github_tools_mcp_configured", True)


_configure_logging()

BASE_LOGGER = logging.getLogger("github_tools_mcp")
GITHUB_LOGGER = logging.getLogger("github_tools_mcp.github_client")
TOOLS_LOGGER = logging.getLogger("github_tools_mcp.tools")

__all__ = [
    "BASE_LOGGER",
    "DETAILED_LEVEL",
    "GITHUB_ACCEPT",
    "GITHUB_API_BASE",
    "GITHUB_API_VERSION",
    "GITHUB_GRAPHQL_URL",
    "GITHUB_LOGGER",
    "GITHUB_PROJECTS_PREVIEW_ACCEPT",
    "GITHUB_TOKEN_ENV_VARS",
    "HTTPX_TIMEOUT",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "LOG_STYLE",
    "SERVER_NAME",
    "TOOLS_LOGGER",
    "USER_AGENT",
]
