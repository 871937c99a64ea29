"""GraphQL naming, fragments and query execution."""

from .client import CallableQueryExecutor, HttpQueryExecutor, QueryExecutor, QueryResult
from .fragments import FragmentRegistry
from .naming import TypeNaming, pascal_case

__all__ = [
    "CallableQueryExecutor",
    "FragmentRegistry",
    "HttpQueryExecutor",
    "QueryExecutor",
    "QueryResult",
    "TypeNaming",
    "pascal_case",
]
