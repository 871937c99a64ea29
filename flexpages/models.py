"""
Pydantic models for content records fetched from the CMS.

Records are validated once when the fetch query returns and treated as
immutable for the rest of the build.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ComponentInstance(BaseModel):
    """One block of a page's flexible-content list.

    Only ``__typename`` is modelled; any other fields the query selected are
    kept untouched as opaque data.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    typename: str = Field(..., alias="__typename")

    @property
    def data(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class ContentPage(BaseModel):
    """A CMS content record that becomes one site page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    database_id: int = Field(..., alias="databaseId")
    node_type: str = Field(..., alias="nodeType")
    slug: str
    uri: str
    content_type: str
    title: Optional[str] = None
    template_name: Optional[str] = None
    components: Tuple[ComponentInstance, ...] = ()

    @classmethod
    def from_node(
        cls,
        node: Mapping[str, Any],
        *,
        content_type: str,
        field_group_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> "ContentPage":
        """Validate a raw query node, locating the component list by field names."""
        components = []
        if field_group_name and field_name:
            group = node.get(field_group_name) or {}
            # Pages without any blocks yet come back as null.
            components = group.get(field_name) or []
        template = node.get("template") or {}
        return cls.model_validate(
            {
                "id": node.get("id"),
                "databaseId": node.get("databaseId"),
                "nodeType": node.get("nodeType") or content_type,
                "slug": node.get("slug"),
                "uri": node.get("uri"),
                "title": node.get("title"),
                "template_name": template.get("templateName"),
                "content_type": content_type,
                "components": components,
            }
        )
