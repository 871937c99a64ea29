"""Unified error model for flexpages."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class FlexPagesError(Exception):
    """Base class for every configuration or authoring error surfaced to users."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        text = self.message
        meta = [part for part in (self.path, self.code) if part]
        if meta:
            text = f"{text} ({'; '.join(meta)})"
        if self.hint:
            text = f"{text} Hint: {self.hint}"
        return text


class ConfigError(FlexPagesError):
    """Raised when the plugin configuration is unreadable or inconsistent."""

    code = "FP_CONFIG"


class QueryError(FlexPagesError):
    """Raised when the content source reports errors for a query."""

    code = "FP_QUERY"

    def __init__(self, message: str, errors: Optional[Sequence[Dict[str, Any]]] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.errors: List[Dict[str, Any]] = list(errors or [])

    def format(self) -> str:
        base = super().format()
        details = [str(error.get("message", error)) for error in self.errors]
        if details:
            return f"{base}: {'; '.join(details)}"
        return base


class MissingDescriptorError(FlexPagesError):
    """Raised when a component folder lacks the files a descriptor needs."""

    code = "FP_DESCRIPTOR"

    def __init__(self, message: str, component: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.component = component


class MissingTemplateError(FlexPagesError):
    """Raised when a named page template has no renderer file on disk."""

    code = "FP_TEMPLATE"

    def __init__(self, message: str, template_name: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.template_name = template_name


class SkeletonError(FlexPagesError):
    """Raised when the renderer skeleton is missing or malformed."""

    code = "FP_SKELETON"


__all__ = [
    "FlexPagesError",
    "ConfigError",
    "QueryError",
    "MissingDescriptorError",
    "MissingTemplateError",
    "SkeletonError",
]
