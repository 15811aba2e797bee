import json
import tomllib
from pathlib import Path

import cli


def test_version_reads_pyproject(capsys):
    assert cli.main(["--version"]) == 0

    out = capsys.readouterr().out.strip()
    assert out == cli._load_project_version()
    assert out != "0.0.0"


def test_load_project_version_missing_file(tmp_path: Path):
    assert cli._load_project_version(tmp_path / "pyproject.toml") == "0.0.0"


def test_load_project_version_from_custom_file(tmp_path: Path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nname = "x"\nversion = "9.8.7"\n', encoding="utf-8")

    assert cli._load_project_version(pyproject) == "9.8.7"


def test_list_tools_prints_catalog(capsys, monkeypatch):
    monkeypatch.delenv("GITHUB_PERSONAL_ACCESS_TOKEN", raising=False)

    assert cli.main(["--list-tools"]) == 0

    catalog = json.loads(capsys.readouterr().out)
    assert len(catalog) == 47
    assert {"name", "description", "inputSchema"} <= set(catalog[0])


def test_unknown_flag_returns_usage_error(capsys):
    assert cli.main(["--bogus"]) == 2


def test_default_runs_stdio_server(monkeypatch):
    calls = []

    async def fake_run_stdio():
        calls.append("run")

    monkeypatch.setattr("github_tools_mcp.server.run_stdio", fake_run_stdio)

    assert cli.main([]) == 0
    assert calls == ["run"]


def test_mcp_dependency_stays_on_1x():
    with (Path(cli.__file__).resolve().parent / "pyproject.toml").open("rb") as fh:
        deps = tomllib.load(fh)["project"]["dependencies"]

    assert "mcp>=1.10,<2" in deps
