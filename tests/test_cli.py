"""Tests for the flexpages command line."""

import json
import logging

import pytest

from flexpages.cli import main
from flexpages.cli.commands import report_status
from flexpages.cli.errors import format_cli_error
from flexpages.devserver import DevServerStatus
from flexpages.errors import ConfigError
from support import FakeExecutor, page_node

PROJECT_TOML = """
contentTypes = ["Page"]
fieldGroupName = "pageComponents"
fieldName = "pageComponents"
typePrefix = ""
graphqlUrl = "https://cms.example.com/graphql"
"""


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    for name in ("FLEXPAGES_ENV", "NODE_ENV", "FLEXPAGES_GRAPHQL_URL", "FLEXPAGES_VERBOSE"):
        monkeypatch.delenv(name, raising=False)
    logger = logging.getLogger("flexpages")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class _StubExecutor(FakeExecutor):
    urls = []

    def __init__(self, url, *, headers=None):
        super().__init__({"data": {"allPage": {"nodes": [page_node(1, "home", "Banner")]}}})
        self.urls.append(url)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2
    assert "usage: flexpages" in capsys.readouterr().out


def test_fragments_command(project, capsys):
    (project / "flexpages.toml").write_text(PROJECT_TOML, encoding="utf-8")

    main(["--root", str(project), "fragments"])

    out = capsys.readouterr().out
    assert out.startswith("✓ Component fragments written to")
    generated = project / ".cache" / "fragments" / "flexpages-components.js"
    assert "fragment PageBannerFields" in generated.read_text(encoding="utf-8")


def test_init_writes_skeleton(tmp_path, capsys):
    main(["--root", str(tmp_path), "init"])

    skeleton = tmp_path / "src" / "templates" / "page.js"
    assert "// __COMPONENT_DISPATCH__" in skeleton.read_text(encoding="utf-8")
    assert (tmp_path / "src" / "components" / "page").is_dir()

    skeleton.write_text("custom\n", encoding="utf-8")
    main(["--root", str(tmp_path), "init"])
    assert skeleton.read_text(encoding="utf-8") == "custom\n"
    assert "already exists" in capsys.readouterr().out


def test_build_without_endpoint_fails(project, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--root", str(project), "build"])

    assert excinfo.value.code == 1
    assert "No GraphQL endpoint configured" in capsys.readouterr().err


def test_build_writes_manifest(project, monkeypatch, capsys):
    (project / "flexpages.toml").write_text(PROJECT_TOML, encoding="utf-8")
    monkeypatch.setattr("flexpages.cli.commands.HttpQueryExecutor", _StubExecutor)

    main(["--root", str(project), "build", "--mode", "production"])

    assert _StubExecutor.urls[-1] == "https://cms.example.com/graphql"
    manifest = json.loads((project / ".cache" / "flexpages-pages.json").read_text(encoding="utf-8"))
    assert [entry["path"] for entry in manifest["pages"]] == ["/home/"]
    assert manifest["pages"][0]["component"].endswith("home-1.js")
    assert "✓ Registered 1 pages (production)" in capsys.readouterr().out


def test_format_cli_error_includes_hint():
    message = format_cli_error(ConfigError("Bad value", path="flexpages.toml", hint="Fix it."))

    assert message == "Error: Bad value (flexpages.toml; FP_CONFIG) Hint: Fix it."


def test_report_status_prints_only_on_change(capsys):
    failing = DevServerStatus(last_build_ok=False, last_error="Component 'Quote' has no fragment file")

    state = report_status(DevServerStatus(last_build_ok=True), None)
    state = report_status(failing, state)
    state = report_status(failing, state)
    state = report_status(DevServerStatus(last_build_ok=True), state)

    captured = capsys.readouterr()
    assert state is None
    assert captured.err.count("✗ Component 'Quote' has no fragment file") == 1
    assert captured.out == "✓ Build recovered\n"


def test_format_cli_error_without_path():
    message = format_cli_error(ConfigError("No GraphQL endpoint configured"))

    assert message == "Error: No GraphQL endpoint configured (FP_CONFIG)"
