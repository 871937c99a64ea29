"""
Per-page renderer synthesis.

Problem: if every page shares one renderer, every page imports every
flexible-content component whether it uses it or not, which bloats each
generated page bundle.

Solution: write one renderer per page that only imports, dispatches to and
queries the components that page actually contains.
"""

from __future__ import annotations

import json
import logging
import textwrap
from pathlib import Path
from typing import Iterable, List, Sequence

from ..config import ComponentSelection, PluginConfig
from ..errors import MissingDescriptorError
from ..graphql.fragments import FragmentRegistry
from ..utils import relative_import, write_file
from .skeleton import RendererSections, RendererSkeleton

logger = logging.getLogger(__name__)


def component_imports(component_names: Sequence[str], components_import_base: str) -> str:
    return "\n".join(
        f"import {name} from '{components_import_base}/{name}'" for name in component_names
    )


def data_binding(config: PluginConfig, content_type: str) -> str:
    naming = config.naming
    group = json.dumps(config.field_group_name)
    field = json.dumps(config.field_name)
    return "\n".join(
        [
            f"const data = pageProps.data.{naming.root_field(content_type)}",
            f"const componentsArray = (data[{group}] && data[{group}][{field}]) || []",
            f"const componentPrefix = {json.dumps(naming.component_prefix(content_type))}",
        ]
    )


def component_dispatch(component_names: Sequence[str]) -> str:
    branches = [
        textwrap.dedent(
            f"""
            if (component.name === {json.dumps(name)}) {{
              return <{name} {{...component.data}} key={{index}} />
            }}
            """
        ).strip()
        for name in component_names
    ]
    return "\n".join(branches)


def page_query(
    fragments: FragmentRegistry,
    config: PluginConfig,
    content_type: str,
    database_id: int,
    component_names: Sequence[str],
) -> str:
    naming = config.naming
    selections = ["__typename"] + [
        fragments.reference_fragment(content_type, name) for name in component_names
    ]
    components = textwrap.indent("\n".join(selections), " " * 8)
    lines = [
        "export const query = graphql`",
        f"  query PageQuery{database_id}($id: String!) {{",
        f"    {naming.root_field(content_type)}(id: {{ eq: $id }}) {{",
        "      title",
        f"      {config.field_group_name} {{",
        f"        {config.field_name} {{",
        components,
        "        }",
        "      }",
        "    }",
        "  }",
        "`",
    ]
    return "\n".join(lines)


class TemplateSynthesizer:
    """Writes per-page renderer modules into the build cache."""

    def __init__(
        self,
        config: PluginConfig,
        fragments: FragmentRegistry,
        *,
        selection: ComponentSelection = ComponentSelection.USED,
    ) -> None:
        self.config = config
        self.fragments = fragments
        self.selection = selection

    def output_path(self, slug: str, database_id: int) -> Path:
        # Slugs repeat across page hierarchies; the database id keeps paths unique.
        return self.config.cache_dir / f"{slug}-{database_id}.js"

    def select_components(self, component_names: Iterable[str]) -> List[str]:
        if self.selection is ComponentSelection.ALL:
            return self.fragments.known_components()
        return sorted(set(component_names))

    def build_sections(
        self,
        database_id: int,
        content_type: str,
        component_names: Sequence[str],
    ) -> RendererSections:
        import_base = relative_import(self.config.components_dir, self.config.cache_dir)
        return RendererSections(
            imports=component_imports(component_names, import_base),
            data_binding=data_binding(self.config, content_type),
            dispatch=component_dispatch(component_names),
            query=page_query(self.fragments, self.config, content_type, database_id, component_names),
        )

    def render(
        self,
        database_id: int,
        content_type: str,
        component_names: Iterable[str],
    ) -> str:
        names = self.select_components(component_names)
        for name in names:
            if name not in self.fragments.components:
                raise MissingDescriptorError(f"No descriptor registered for component '{name}'", name)
            if not (self.config.components_dir / name).is_dir():
                raise MissingDescriptorError(
                    f"Component '{name}' has no folder to import from",
                    name,
                    path=str(self.config.components_dir / name),
                )
        skeleton = RendererSkeleton.load(self.config.skeleton_file).rebase_imports(self.config.cache_dir)
        return skeleton.render(self.build_sections(database_id, content_type, names))

    def synthesize(
        self,
        database_id: int,
        content_type: str,
        slug: str,
        component_names: Iterable[str],
    ) -> Path:
        """Render and write the renderer for one page, returning its path."""
        content = self.render(database_id, content_type, component_names)
        path = self.output_path(slug, database_id)
        write_file(path, content)
        logger.debug("Wrote renderer for %s %s to %s", content_type, database_id, path)
        return path
