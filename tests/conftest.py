import asyncio
import inspect

import pytest

from flexpages.cli.commands import default_skeleton_text
from flexpages.config import BuildMode, config_from_mapping
from support import BANNER_FIELDS, GENERIC_CONTENT_FIELDS, write_component


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run async test functions without requiring external plugins."""
    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            # Filter funcargs to only include parameters the function expects
            sig = inspect.signature(test_function)
            filtered_args = {k: v for k, v in pyfuncitem.funcargs.items() if k in sig.parameters}
            loop.run_until_complete(test_function(**filtered_args))
        finally:
            loop.close()
            asyncio.set_event_loop(None)
        return True
    return None


def pytest_configure(config):
    """Register markers for pytest."""
    config.addinivalue_line("markers", "asyncio: mark async tests")


@pytest.fixture
def project(tmp_path):
    """A site tree with two components, the default skeleton and two named templates."""
    components = tmp_path / "src" / "components" / "page"
    write_component(components, "Banner", BANNER_FIELDS)
    write_component(components, "GenericContent", GENERIC_CONTENT_FIELDS)
    templates = tmp_path / "src" / "templates"
    templates.mkdir(parents=True)
    (templates / "page.js").write_text(default_skeleton_text(), encoding="utf-8")
    (templates / "team-grid.js").write_text("export default () => null\n", encoding="utf-8")
    (templates / "post.js").write_text("export default () => null\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(project):
    return config_from_mapping(
        {
            "contentTypes": ["Page"],
            "fieldGroupName": "pageComponents",
            "fieldName": "pageComponents",
            "typePrefix": "",
        },
        project,
        mode=BuildMode.PRODUCTION,
    )
