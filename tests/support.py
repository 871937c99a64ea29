"""Shared builders for flexpages tests."""

from pathlib import Path

from flexpages.graphql.client import QueryResult

BANNER_FIELDS = "title\ndescription\n"
GENERIC_CONTENT_FIELDS = "content\n"


def write_component(components_dir: Path, name: str, fields: str) -> Path:
    folder = components_dir / name
    folder.mkdir(parents=True, exist_ok=True)
    (folder / "index.js").write_text(f"export {{ default }} from './{name}'\n", encoding="utf-8")
    path = folder / f"{name}.graphql"
    path.write_text(fields, encoding="utf-8")
    return path


def page_node(
    database_id,
    slug,
    *components,
    template="Default",
    title=None,
    content_type="Page",
    type_prefix="",
):
    return {
        "id": f"cG9zdDo{database_id}",
        "databaseId": database_id,
        "nodeType": content_type,
        "slug": slug,
        "uri": f"/{slug}/",
        "title": title or slug.title(),
        "template": {"templateName": template},
        "pageComponents": {
            "pageComponents": [
                {"__typename": f"{type_prefix}{content_type}_PageComponents_PageComponents_{name}"}
                for name in components
            ]
            or None
        },
    }


class FakeExecutor:
    """Records queries and returns a canned GraphQL payload."""

    def __init__(self, payload):
        self.payload = payload
        self.queries = []

    async def execute(self, query, variables=None):
        self.queries.append(query)
        return QueryResult.from_payload(self.payload)
