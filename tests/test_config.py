import logging

import pytest

from github_tools_mcp import config


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, logging.INFO),
        ("", logging.INFO),
        ("debug", logging.DEBUG),
        ("DETAILED", config.DETAILED_LEVEL),
        ("warning", logging.WARNING),
        ("25", 25),
        ("not-a-level", logging.INFO),
    ],
)
def test_resolve_log_level(raw, expected):
    assert config._resolve_log_level(raw) == expected


def test_detailed_level_is_installed(caplog):
    logger = logging.getLogger("github_tools_mcp.tests.detailed")
    caplog.set_level(config.DETAILED_LEVEL, logger=logger.name)

    logger.detailed("request %s", "GET /user")

    assert logging.getLevelName(config.DETAILED_LEVEL) == "DETAILED"
    assert [r.getMessage() for r in caplog.records] == ["request GET /user"]


def test_optional_float(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HTTPX_TIMEOUT", "12.5")
    assert config._optional_float("HTTPX_TIMEOUT") == 12.5

    monkeypatch.setenv("HTTPX_TIMEOUT", "soon")
    assert config._optional_float("HTTPX_TIMEOUT") is None

    monkeypatch.delenv("HTTPX_TIMEOUT")
    assert config._optional_float("HTTPX_TIMEOUT") is None


def test_api_base_has_no_trailing_slash():
    assert not config.GITHUB_API_BASE.endswith("/")
    assert config.GITHUB_GRAPHQL_URL.endswith("/graphql")
