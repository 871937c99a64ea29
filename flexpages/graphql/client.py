"""
GraphQL query execution.

The build only depends on the :class:`QueryExecutor` protocol. Content-source
errors are returned in :class:`QueryResult.errors`; transport failures raise.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Union

import httpx

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    data: Optional[Dict[str, Any]] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "QueryResult":
        errors = payload.get("errors") or []
        if not isinstance(errors, list):
            errors = [errors]
        normalized = [error if isinstance(error, dict) else {"message": str(error)} for error in errors]
        return cls(data=payload.get("data"), errors=normalized)


class QueryExecutor(Protocol):
    """Runs a GraphQL query against the content source."""

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> QueryResult:  # pragma: no cover - typing helper
        ...


class HttpQueryExecutor:
    """
    Executes queries against a GraphQL HTTP endpoint.

    Usage::

        async with HttpQueryExecutor("https://cms.example.com/graphql") as executor:
            result = await executor.execute("{ generalSettings { title } }")
    """

    def __init__(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.headers = {"Content-Type": "application/json", **dict(headers or {})}
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> QueryResult:
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        client = self._get_http_client()
        logger.debug("POST %s (%d bytes of query)", self.url, len(query))
        response = await client.post(self.url, json=payload, headers=self.headers)
        response.raise_for_status()
        return QueryResult.from_payload(response.json())

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "HttpQueryExecutor":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


HostQuery = Callable[..., Union[Mapping[str, Any], Awaitable[Mapping[str, Any]]]]


class CallableQueryExecutor:
    """Adapts a host-provided ``graphql(query)`` helper returning ``{data, errors}``."""

    def __init__(self, func: HostQuery) -> None:
        self._func = func

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> QueryResult:
        result = self._func(query, variables) if variables else self._func(query)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, QueryResult):
            return result
        return QueryResult.from_payload(result or {})
