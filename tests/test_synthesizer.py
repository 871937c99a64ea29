"""Tests for per-page renderer synthesis."""

import pytest

from flexpages.codegen.renderer import TemplateSynthesizer, component_dispatch, data_binding
from flexpages.components import ComponentDescriptor, ComponentRegistry
from flexpages.config import ComponentSelection
from flexpages.errors import MissingDescriptorError, SkeletonError
from flexpages.graphql.fragments import FragmentRegistry


@pytest.fixture
def fragments(config):
    return FragmentRegistry(ComponentRegistry.from_directory(config.components_dir), config.naming)


@pytest.fixture
def synthesizer(config, fragments):
    return TemplateSynthesizer(config, fragments)


def test_duplicate_components_are_imported_once(synthesizer):
    path = synthesizer.synthesize(42, "Page", "about", ["Banner", "Banner"])
    content = path.read_text(encoding="utf-8")

    assert content.count("import Banner from '../../src/components/page/Banner'") == 1
    assert content.count('component.name === "Banner"') == 1
    assert "GenericContent" not in content
    assert "return <Banner {...component.data} key={index} />" in content


def test_page_query_only_references_used_components(synthesizer):
    content = synthesizer.render(42, "Page", ["GenericContent"])

    assert "query PageQuery42($id: String!) {" in content
    assert "page(id: { eq: $id }) {" in content
    assert "... on Page_PageComponents_PageComponents_GenericContent { ...PageGenericContentFields }" in content
    assert "PageBannerFields" not in content


def test_output_is_sorted_and_deterministic(synthesizer):
    first = synthesizer.synthesize(7, "Page", "home", ["GenericContent", "Banner"]).read_bytes()
    second = synthesizer.synthesize(7, "Page", "home", ["Banner", "GenericContent", "Banner"]).read_bytes()

    assert first == second
    text = first.decode("utf-8")
    assert text.index("import Banner") < text.index("import GenericContent")


def test_shared_slug_gets_distinct_paths(synthesizer):
    first = synthesizer.synthesize(10, "Page", "team", ["Banner"])
    second = synthesizer.synthesize(11, "Page", "team", ["Banner"])

    assert first != second
    assert first.name == "team-10.js"
    assert second.name == "team-11.js"
    assert first.exists() and second.exists()


def test_empty_component_list_still_writes_renderer(synthesizer):
    path = synthesizer.synthesize(3, "Page", "blank", [])
    content = path.read_text(encoding="utf-8")

    assert "import Banner" not in content
    assert "import GenericContent" not in content
    assert "component.name ===" not in content
    assert "__typename" in content
    assert "was not found" in content
    assert "export default PageTemplate" in content


def test_all_selection_imports_every_known_component(config, fragments):
    synthesizer = TemplateSynthesizer(config, fragments, selection=ComponentSelection.ALL)

    content = synthesizer.render(1, "Page", [])

    assert "import Banner from" in content
    assert "import GenericContent from" in content


def test_data_binding_uses_configured_fields(config):
    binding = data_binding(config, "Page")

    assert binding.splitlines() == [
        "const data = pageProps.data.page",
        'const componentsArray = (data["pageComponents"] && data["pageComponents"]["pageComponents"]) || []',
        'const componentPrefix = "Page_PageComponents_PageComponents_"',
    ]


def test_dispatch_branch_per_component():
    dispatch = component_dispatch(["Banner", "Quote"])

    assert dispatch.count("if (component.name ===") == 2
    assert "return <Quote {...component.data} key={index} />" in dispatch


def test_missing_skeleton_fails_without_writing(config, synthesizer):
    config.skeleton_file.unlink()

    with pytest.raises(SkeletonError):
        synthesizer.synthesize(5, "Page", "gone", ["Banner"])

    assert not synthesizer.output_path("gone", 5).exists()


def test_component_without_folder_fails(config):
    registry = ComponentRegistry([ComponentDescriptor(name="Hero", fields=lambda: "image")])
    synthesizer = TemplateSynthesizer(config, FragmentRegistry(registry, config.naming))

    with pytest.raises(MissingDescriptorError) as excinfo:
        synthesizer.synthesize(5, "Page", "hero", ["Hero"])

    assert excinfo.value.component == "Hero"


def test_unregistered_component_fails(synthesizer):
    with pytest.raises(MissingDescriptorError):
        synthesizer.render(5, "Page", ["Quote"])
