"""
GraphQL fragments for page components.

Each registered component yields, per content type:

* a named fragment definition, collected into a single generated module that
  the site builder's query compiler picks up, and
* an inline reference to that fragment, used inside page queries.
"""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from typing import Iterable, List

from ..components.registry import ComponentRegistry
from ..utils import write_if_changed
from .naming import TypeNaming

logger = logging.getLogger(__name__)

FRAGMENTS_EXPORT = "flexpagesComponentFragments"


class FragmentRegistry:
    """Combines component descriptors with the naming scheme into fragments."""

    def __init__(self, components: ComponentRegistry, naming: TypeNaming) -> None:
        self.components = components
        self.naming = naming

    def known_components(self) -> List[str]:
        return self.components.names()

    def reference_fragment(self, content_type: str, component: str) -> str:
        type_name = self.naming.component_type_name(content_type, component)
        fragment = self.naming.fragment_name(content_type, component)
        return f"... on {type_name} {{ ...{fragment} }}"

    def named_fragment_definition(self, content_type: str, component: str) -> str:
        descriptor = self.components.get(component)
        body = textwrap.dedent(descriptor.fragment_body()).strip()
        type_name = self.naming.component_type_name(content_type, component)
        fragment = self.naming.fragment_name(content_type, component)
        lines = [f"fragment {fragment} on {type_name} {{"]
        if body:
            lines.append(textwrap.indent(body, "  "))
        lines.append("}")
        return "\n".join(lines)

    def definitions(self, content_types: Iterable[str]) -> List[str]:
        """One definition per (content type, known component), in a stable order."""
        return [
            self.named_fragment_definition(content_type, component)
            for content_type in content_types
            for component in self.known_components()
        ]

    def render_module(self, content_types: Iterable[str]) -> str:
        definitions = self.definitions(content_types)
        header = [
            "// Generated by flexpages from the page component .graphql files.",
            "// Edits are overwritten on the next build.",
        ]
        if not definitions:
            return "\n".join(header + ["// No page components are registered.", ""])
        body = textwrap.indent("\n\n".join(definitions), "  ")
        lines = header + [
            'import { graphql } from "gatsby"',
            "",
            f"export const {FRAGMENTS_EXPORT} = graphql`",
            body,
            "`",
            "",
        ]
        return "\n".join(lines)

    def aggregate(self, content_types: Iterable[str], path: Path) -> Path:
        """Write every named fragment definition into ``path``."""
        content_types = list(content_types)
        content = self.render_module(content_types)
        if write_if_changed(path, content):
            logger.info(
                "Wrote %d component fragments for %s to %s",
                len(self.known_components()) * len(content_types),
                ", ".join(content_types),
                path,
            )
        else:
            logger.debug("Component fragments unchanged at %s", path)
        return path
