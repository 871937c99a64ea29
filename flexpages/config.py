"""Project configuration for the flexpages build plugin."""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError
from .graphql.naming import TypeNaming

CONFIG_FILE_NAMES = ("flexpages.toml", ".flexpagesrc")

# camelCase spellings accepted alongside the snake_case keys.
_KEY_ALIASES = {
    "contentTypes": "content_types",
    "fieldGroupName": "field_group_name",
    "fieldName": "field_name",
    "typePrefix": "type_prefix",
    "defaultTemplate": "default_template",
    "componentsDir": "components_dir",
    "skeletonFile": "skeleton_file",
    "templatesDir": "templates_dir",
    "cacheDir": "cache_dir",
    "fragmentsFile": "fragments_file",
    "fragmentSuffix": "fragment_suffix",
    "graphqlUrl": "graphql_url",
    "graphqlHeaders": "graphql_headers",
    "refreshUrl": "refresh_url",
    "fixedTemplates": "fixed_templates",
    "watchInterval": "watch_interval",
    "manifestFile": "manifest_file",
}

_PATH_KEYS = (
    "components_dir",
    "skeleton_file",
    "templates_dir",
    "cache_dir",
    "fragments_file",
    "manifest_file",
)


class BuildMode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ComponentSelection(str, Enum):
    """Which components a synthesized renderer imports."""

    USED = "used"
    ALL = "all"


@dataclass(frozen=True)
class PluginConfig:
    """Immutable configuration threaded through every flexpages entry point."""

    content_types: Tuple[str, ...] = ("Page",)
    field_group_name: str = "pageComponents"
    field_name: str = "components"
    type_prefix: str = "Wp"
    default_template: str = "Default"
    root: Path = Path(".")
    components_dir: Path = Path("src/components/page")
    skeleton_file: Path = Path("src/templates/page.js")
    templates_dir: Path = Path("src/templates")
    cache_dir: Path = Path(".cache/page-templates")
    fragments_file: Path = Path(".cache/fragments/flexpages-components.js")
    fragment_suffix: str = ".graphql"
    mode: BuildMode = BuildMode.PRODUCTION
    graphql_url: Optional[str] = None
    graphql_headers: Dict[str, str] = field(default_factory=dict)
    refresh_url: str = "http://localhost:8000/__refresh"
    fixed_templates: Dict[str, str] = field(default_factory=dict)
    watch_interval: float = 0.75
    manifest_file: Path = Path(".cache/flexpages-pages.json")

    @property
    def naming(self) -> TypeNaming:
        return TypeNaming(
            type_prefix=self.type_prefix,
            field_group_name=self.field_group_name,
            field_name=self.field_name,
        )

    @property
    def component_selection(self) -> ComponentSelection:
        # Development imports every component so authors can add blocks in the
        # CMS without restarting the dev server.
        if self.mode is BuildMode.DEVELOPMENT:
            return ComponentSelection.ALL
        return ComponentSelection.USED

    def with_mode(self, mode: BuildMode) -> "PluginConfig":
        return replace(self, mode=mode)

    def resolved(self) -> "PluginConfig":
        """Return a copy whose relative paths are anchored at ``root``."""
        root = self.root.resolve()
        updates: Dict[str, Any] = {"root": root}
        for key in _PATH_KEYS:
            value: Path = getattr(self, key)
            updates[key] = value if value.is_absolute() else (root / value)
        return replace(self, **updates)


def resolve_mode(explicit: Optional[str] = None) -> BuildMode:
    """Decide the build mode once: explicit value, then environment, then production.

    ``NODE_ENV`` is shared with other tooling (``test``, ``staging``, ...), so
    any value there other than ``production`` means development.
    """
    raw = explicit or os.getenv("FLEXPAGES_ENV")
    if not raw:
        node_env = os.getenv("NODE_ENV")
        if node_env is None:
            return BuildMode.PRODUCTION
        if node_env.strip().lower() == BuildMode.PRODUCTION.value:
            return BuildMode.PRODUCTION
        return BuildMode.DEVELOPMENT
    value = raw.strip().lower()
    if value in {"dev", "develop", "development"}:
        return BuildMode.DEVELOPMENT
    if value in {"prod", "production"}:
        return BuildMode.PRODUCTION
    raise ConfigError(
        f"Unknown build mode '{raw}'",
        hint="Use 'development' or 'production'.",
    )


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILE_NAMES:
        path = root / candidate
        if path.exists():
            return path
    return None


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        if path.suffix == ".toml":
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        else:
            data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Could not read configuration: {exc}", path=str(path)) from exc
    # pyproject-style nesting under a [flexpages] table is accepted too.
    if isinstance(data.get("flexpages"), dict):
        data = data["flexpages"]
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a table/object", path=str(path))
    return data


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in data.items()}


def _string_map(value: Any, key: str, path: Optional[Path]) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a table of strings", path=str(path) if path else None)
    return {str(name): str(item) for name, item in value.items()}


def config_from_mapping(
    data: Mapping[str, Any],
    root: Path,
    *,
    mode: Optional[BuildMode] = None,
    source: Optional[Path] = None,
) -> PluginConfig:
    """Build a resolved :class:`PluginConfig` from raw configuration values."""
    values = _normalize_keys(data)
    unknown = sorted(set(values) - set(PluginConfig.__dataclass_fields__) - {"mode"})
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            path=str(source) if source else None,
        )

    defaults = PluginConfig()
    content_types = values.get("content_types", defaults.content_types)
    if isinstance(content_types, str):
        content_types = [content_types]
    if not content_types:
        raise ConfigError("At least one content type must be configured", path=str(source) if source else None)

    kwargs: Dict[str, Any] = {
        "content_types": tuple(str(item) for item in content_types),
        "root": root,
        "graphql_headers": _string_map(values.get("graphql_headers"), "graphql_headers", source),
        "fixed_templates": _string_map(values.get("fixed_templates"), "fixed_templates", source),
    }
    for key in ("field_group_name", "field_name", "type_prefix", "default_template", "fragment_suffix", "refresh_url"):
        if key in values:
            kwargs[key] = str(values[key])
    for key in _PATH_KEYS:
        if key in values:
            kwargs[key] = Path(values[key])
    if values.get("graphql_url"):
        kwargs["graphql_url"] = str(values["graphql_url"])
    if "watch_interval" in values:
        kwargs["watch_interval"] = float(values["watch_interval"])
    kwargs["mode"] = mode or resolve_mode(values.get("mode"))

    overlap = set(kwargs["content_types"]) & set(kwargs["fixed_templates"])
    if overlap:
        raise ConfigError(
            f"Content types cannot be both page-built and fixed-template: {', '.join(sorted(overlap))}",
            path=str(source) if source else None,
        )
    return PluginConfig(**kwargs).resolved()


def load_plugin_config(
    root: Path,
    explicit: Optional[Path] = None,
    *,
    mode: Optional[BuildMode] = None,
) -> PluginConfig:
    """Load ``flexpages.toml`` (or ``.flexpagesrc`` JSON) from ``root``."""
    root = root.resolve()
    config_path = locate_config_file(root, explicit)
    if explicit is not None and config_path is None:
        raise ConfigError("Configuration file not found", path=str(explicit))
    data: Dict[str, Any] = {}
    if config_path is not None:
        data = _read_config_file(config_path)
    config = config_from_mapping(data, root, mode=mode, source=config_path)
    if config.graphql_url is None and os.getenv("FLEXPAGES_GRAPHQL_URL"):
        config = replace(config, graphql_url=os.environ["FLEXPAGES_GRAPHQL_URL"])
    return config


__all__ = [
    "BuildMode",
    "ComponentSelection",
    "PluginConfig",
    "config_from_mapping",
    "load_plugin_config",
    "locate_config_file",
    "resolve_mode",
]
