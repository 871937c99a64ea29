"""Build entry point: fetch pages, synthesize renderers, register pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .codegen.renderer import TemplateSynthesizer
from .components.registry import ComponentRegistry
from .config import PluginConfig
from .errors import ConfigError
from .fetcher import fetch_pages
from .graphql.client import QueryExecutor
from .graphql.fragments import FragmentRegistry
from .registrar import PageRegistrar, PageRegistration, RegisterPage

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    registrations: List[PageRegistration]
    fragments_file: Path


def load_registry(config: PluginConfig, static: Optional[ComponentRegistry] = None) -> ComponentRegistry:
    if not config.components_dir.is_dir():
        raise ConfigError(
            "Components folder does not exist",
            path=str(config.components_dir),
            hint="Set components_dir in flexpages.toml.",
        )
    return ComponentRegistry.from_directory(
        config.components_dir,
        suffix=config.fragment_suffix,
        static=static,
    )


def write_fragments(config: PluginConfig, registry: ComponentRegistry) -> Path:
    fragments = FragmentRegistry(registry, config.naming)
    return fragments.aggregate(config.content_types, config.fragments_file)


async def create_pages(
    config: PluginConfig,
    executor: QueryExecutor,
    register_page: RegisterPage,
    *,
    registry: Optional[ComponentRegistry] = None,
) -> BuildResult:
    """
    Run one build.

    Args:
        config: Resolved plugin configuration.
        executor: GraphQL executor for the content source.
        register_page: Site builder action receiving ``{path, component, context}``.
        registry: Statically registered components; folders without a static
            entry are loaded from their fragment files.

    Raises:
        FlexPagesError: On the first configuration or authoring error.
    """
    registry = load_registry(config, static=registry)
    fragments_file = write_fragments(config, registry)

    config.cache_dir.mkdir(parents=True, exist_ok=True)
    pages = await fetch_pages(executor, config)

    synthesizer = TemplateSynthesizer(
        config,
        FragmentRegistry(registry, config.naming),
        selection=config.component_selection,
    )
    registrar = PageRegistrar(config, synthesizer, register_page)
    registrations = await registrar.register_all(pages)
    logger.info(
        "Registered %d pages (%s mode, %d components known)",
        len(registrations),
        config.mode.value,
        len(registry),
    )
    return BuildResult(registrations=registrations, fragments_file=fragments_file)
