"""Eager import of the tool modules.

Tool registration is side-effect based: ``@mcp_tool(...)`` executes at import
time. Importing this module imports every public module under
``github_tools_mcp.main_tools`` so the registry holds the full catalog.
"""

from __future__ import annotations

import importlib
import pkgutil

from github_tools_mcp.config import BASE_LOGGER

LOGGER = BASE_LOGGER.getChild("tools_main")


def _import_all_main_tool_modules() -> None:
    import github_tools_mcp.main_tools as _pkg

    for mod in pkgutil.iter_modules(getattr(_pkg, "__path__", []) or []):
        name = getattr(mod, "name", "")
        if not name or name.startswith("_"):
            continue
        module_name = f"{_pkg.__name__}.{name}"
        LOGGER.debug("Registering tool module %s", module_name)
        importlib.import_module(module_name)


_import_all_main_tool_modules()
