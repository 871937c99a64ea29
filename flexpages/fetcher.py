"""Fetch every page of the configured content types in one GraphQL query."""

from __future__ import annotations

import logging
import textwrap
from typing import List

from .config import PluginConfig
from .errors import QueryError
from .graphql.client import QueryExecutor
from .models import ContentPage

logger = logging.getLogger(__name__)

PAGE_METADATA_FIELDS = ("id", "databaseId", "nodeType", "slug", "uri", "title")

# Fixed-template records (posts) are listed newest first.
FIXED_TEMPLATE_SORT = "sort: { order: DESC, fields: [date] }"


def _collection_selection(config: PluginConfig, content_type: str, *, with_components: bool) -> str:
    fields = list(PAGE_METADATA_FIELDS)
    if with_components:
        fields.append("template {\n  templateName\n}")
        # Only __typename is requested here; field bodies are fetched by each
        # page's own query once its component subset is known.
        fields.append(
            f"{config.field_group_name} {{\n"
            f"  {config.field_name} {{\n"
            f"    __typename\n"
            f"  }}\n"
            f"}}"
        )
    nodes = textwrap.indent("\n".join(fields), "    ")
    collection = config.naming.collection_field(content_type)
    if not with_components:
        collection = f"{collection}({FIXED_TEMPLATE_SORT})"
    return f"{collection} {{\n  nodes {{\n{nodes}\n  }}\n}}"


def build_pages_query(config: PluginConfig) -> str:
    """Build the combined query for page-built and fixed-template content types."""
    selections = [
        _collection_selection(config, content_type, with_components=True)
        for content_type in config.content_types
    ]
    selections.extend(
        _collection_selection(config, content_type, with_components=False)
        for content_type in config.fixed_templates
    )
    body = textwrap.indent("\n".join(selections), "  ")
    return f"query FlexpagesAllPages {{\n{body}\n}}\n"


async def fetch_pages(executor: QueryExecutor, config: PluginConfig) -> List[ContentPage]:
    """
    Run the combined query and flatten the results.

    Pages are ordered by content-type declaration order (fixed-template types
    last), then by the order the content source returned them. Any reported
    error aborts the build.
    """
    result = await executor.execute(build_pages_query(config))
    if not result.ok:
        logger.error("GraphQL query for pages failed: %s", result.errors)
        raise QueryError("GraphQL query failed", result.errors)
    data = result.data or {}

    pages: List[ContentPage] = []
    for content_type in config.content_types:
        for node in _nodes(data, config, content_type):
            pages.append(
                ContentPage.from_node(
                    node,
                    content_type=content_type,
                    field_group_name=config.field_group_name,
                    field_name=config.field_name,
                )
            )
    for content_type in config.fixed_templates:
        for node in _nodes(data, config, content_type):
            pages.append(ContentPage.from_node(node, content_type=content_type))

    logger.info(
        "Fetched %d pages across %d content types",
        len(pages),
        len(config.content_types) + len(config.fixed_templates),
    )
    return pages


def _nodes(data: dict, config: PluginConfig, content_type: str) -> list:
    key = config.naming.collection_field(content_type)
    collection = data.get(key)
    if collection is None:
        raise QueryError(
            f"GraphQL response has no '{key}' collection",
            hint=f"Check that the content type '{content_type}' is exposed to GraphQL.",
        )
    return collection.get("nodes") or []
