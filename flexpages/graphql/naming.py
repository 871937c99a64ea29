"""GraphQL type, field and fragment names derived from the plugin configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass

_FIELD_SPLIT_RE = re.compile(r"[_\s]+")


def pascal_case(value: str) -> str:
    """Convert a GraphQL field name into the casing WPGraphQL uses in type names.

    >>> pascal_case("page_components")
    'PageComponents'
    >>> pascal_case("pageComponents")
    'PageComponents'
    """
    parts = [part for part in _FIELD_SPLIT_RE.split(value.strip()) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts)


def lower_first(value: str) -> str:
    return value[:1].lower() + value[1:]


@dataclass(frozen=True)
class TypeNaming:
    """
    Naming scheme shared by the fetch query, the fragments and the renderers.

    With ``type_prefix="Wp"``, ``field_group_name="pageComponents"`` and
    ``field_name="components"`` the ``Banner`` component of the ``Page``
    content type is the GraphQL type ``WpPage_PageComponents_Components_Banner``
    and its named fragment is ``WpPageBannerFields``.
    """

    type_prefix: str
    field_group_name: str
    field_name: str

    def content_type_name(self, content_type: str) -> str:
        return f"{self.type_prefix}{content_type}"

    def root_field(self, content_type: str) -> str:
        return lower_first(self.content_type_name(content_type))

    def collection_field(self, content_type: str) -> str:
        return f"all{self.content_type_name(content_type)}"

    def component_prefix(self, content_type: str) -> str:
        return (
            f"{self.content_type_name(content_type)}_"
            f"{pascal_case(self.field_group_name)}_{pascal_case(self.field_name)}_"
        )

    def component_type_name(self, content_type: str, component: str) -> str:
        return f"{self.component_prefix(content_type)}{component}"

    def fragment_name(self, content_type: str, component: str) -> str:
        return f"{self.content_type_name(content_type)}{component}Fields"

    def component_name(self, typename: str, content_type: str) -> str:
        """Strip the known polymorphic prefix from an instance ``__typename``."""
        prefix = self.component_prefix(content_type)
        if typename.startswith(prefix) and len(typename) > len(prefix):
            return typename[len(prefix):]
        return typename.rsplit("_", 1)[-1]
