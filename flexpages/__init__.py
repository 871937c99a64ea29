"""
flexpages – per-page component pruning for CMS-driven static sites.

A site built from a headless CMS usually renders every "flexible content"
page through one shared template, so every page ships every block component.
flexpages instead writes one renderer per page at build time that imports,
dispatches to and queries only the components the page actually contains.

The package is organised into:

* ``config`` – immutable :class:`PluginConfig` and its loader.
* ``components`` – the component descriptor registry.
* ``graphql`` – naming scheme, fragments and query execution.
* ``fetcher`` – the combined page query.
* ``codegen`` – renderer skeletons and the template synthesizer.
* ``registrar`` – per-page renderer choice and page registration.
* ``build`` – :func:`create_pages`, the once-per-build entry point.
* ``devserver`` – development-mode file watching.
* ``cli`` – the ``flexpages`` command.
"""

from importlib import metadata as _metadata

try:  # pragma: no cover - metadata fallback for source trees
    __version__ = _metadata.version("flexpages")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
    __version__ = "0.1.0"

from .build import BuildResult, create_pages
from .components import ComponentDescriptor, ComponentRegistry
from .config import BuildMode, ComponentSelection, PluginConfig, load_plugin_config
from .errors import (
    ConfigError,
    FlexPagesError,
    MissingDescriptorError,
    MissingTemplateError,
    QueryError,
    SkeletonError,
)

__all__ = [
    "__version__",
    "BuildMode",
    "BuildResult",
    "ComponentDescriptor",
    "ComponentRegistry",
    "ComponentSelection",
    "ConfigError",
    "FlexPagesError",
    "MissingDescriptorError",
    "MissingTemplateError",
    "PluginConfig",
    "QueryError",
    "SkeletonError",
    "create_pages",
    "load_plugin_config",
]
