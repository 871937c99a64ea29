"""Tests for GraphQL query execution."""

import json

import httpx
import pytest

from flexpages.graphql.client import CallableQueryExecutor, HttpQueryExecutor, QueryResult


def _executor(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpQueryExecutor("https://cms.test/graphql", headers={"Authorization": "Bearer t"}, client=client)


async def test_http_executor_posts_query_and_returns_data():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"data": {"allPage": {"nodes": []}}})

    executor = _executor(handler)
    result = await executor.execute("{ allPage { nodes { id } } }")

    assert seen == {"body": {"query": "{ allPage { nodes { id } } }"}, "auth": "Bearer t"}
    assert result.ok
    assert result.data == {"allPage": {"nodes": []}}


async def test_http_executor_returns_graphql_errors():
    executor = _executor(lambda request: httpx.Response(200, json={"errors": [{"message": "nope"}]}))

    result = await executor.execute("{ x }", {"id": 1})

    assert not result.ok
    assert result.errors == [{"message": "nope"}]


async def test_http_executor_raises_on_transport_failure():
    executor = _executor(lambda request: httpx.Response(502, text="bad gateway"))

    with pytest.raises(httpx.HTTPStatusError):
        await executor.execute("{ x }")


async def test_http_executor_closes_its_own_client():
    async with HttpQueryExecutor("https://cms.test/graphql") as executor:
        executor._get_http_client()
    assert executor._client is None


async def test_callable_executor_accepts_sync_functions():
    executor = CallableQueryExecutor(lambda query: {"data": {"q": query}})

    result = await executor.execute("{ a }")

    assert result.data == {"q": "{ a }"}


async def test_callable_executor_accepts_coroutines():
    async def graphql(query):
        return {"data": None, "errors": ["broken"]}

    result = await CallableQueryExecutor(graphql).execute("{ a }")

    assert result.errors == [{"message": "broken"}]


def test_query_result_from_payload_defaults():
    result = QueryResult.from_payload({})

    assert result.data is None
    assert result.errors == []
