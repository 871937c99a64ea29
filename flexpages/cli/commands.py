"""
Command implementations for the flexpages CLI.

``build`` runs a full build against the configured GraphQL endpoint and writes
the page registrations to a JSON manifest for the site builder to consume.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from functools import partial
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

from flexpages.build import BuildResult, create_pages, load_registry, write_fragments
from flexpages.config import BuildMode, PluginConfig, load_plugin_config, resolve_mode
from flexpages.devserver import DevServerStatus, DevSession
from flexpages.errors import ConfigError
from flexpages.graphql.client import HttpQueryExecutor
from flexpages.utils import write_file

from .errors import handle_cli_exception

logger = logging.getLogger(__name__)


def load_config(args: argparse.Namespace, *, mode: Optional[BuildMode] = None) -> PluginConfig:
    root = Path(getattr(args, "root", None) or Path.cwd())
    explicit = Path(args.config) if getattr(args, "config", None) else None
    if mode is None and getattr(args, "mode", None):
        mode = resolve_mode(args.mode)
    return load_plugin_config(root, explicit, mode=mode)


async def run_build(config: PluginConfig) -> BuildResult:
    if not config.graphql_url:
        raise ConfigError(
            "No GraphQL endpoint configured",
            hint="Set graphql_url in flexpages.toml or FLEXPAGES_GRAPHQL_URL.",
        )
    registrations: List[Dict[str, Any]] = []
    async with HttpQueryExecutor(config.graphql_url, headers=config.graphql_headers) as executor:
        result = await create_pages(config, executor, registrations.append)
    manifest = {"pages": sorted(registrations, key=lambda entry: entry["path"])}
    write_file(config.manifest_file, json.dumps(manifest, indent=2) + "\n")
    return result


def build_once(config: PluginConfig) -> BuildResult:
    return asyncio.run(run_build(config))


def cmd_build(args: argparse.Namespace) -> None:
    """Handle ``flexpages build``."""
    try:
        config = load_config(args)
        result = build_once(config)
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
        return
    print(f"✓ Registered {len(result.registrations)} pages ({config.mode.value})")
    print(f"✓ Page manifest written to {config.manifest_file}")


def cmd_fragments(args: argparse.Namespace) -> None:
    """Handle ``flexpages fragments``: regenerate the aggregated fragment file only."""
    try:
        config = load_config(args)
        path = write_fragments(config, load_registry(config))
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
        return
    print(f"✓ Component fragments written to {path}")


def report_status(status: DevServerStatus, previous_error: Optional[str]) -> Optional[str]:
    """Print a line when the watcher's error state changes; return the new state."""
    if status.last_error == previous_error:
        return previous_error
    if status.last_error:
        print(f"✗ {status.last_error}", file=sys.stderr)
    else:
        print("✓ Build recovered")
    return status.last_error


def cmd_develop(args: argparse.Namespace) -> None:
    """Handle ``flexpages develop``: build once in development mode, then watch."""
    try:
        config = load_config(args, mode=BuildMode.DEVELOPMENT)
        rebuild = None
        if config.graphql_url:
            rebuild = partial(build_once, config)
            rebuild()
        session = DevSession(config, rebuild=rebuild)
        session.start()
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
        return
    print(f"✓ Watching {config.components_dir} (Ctrl+C to stop)")
    last_error: Optional[str] = None
    try:
        while True:
            time.sleep(1.0)
            last_error = report_status(session.status, last_error)
    except KeyboardInterrupt:
        pass
    finally:
        session.stop()


def default_skeleton_text() -> str:
    return resources.files("flexpages").joinpath("templates/page.js").read_text(encoding="utf-8")


def cmd_init(args: argparse.Namespace) -> None:
    """Handle ``flexpages init``: write the default skeleton and components folder."""
    try:
        config = load_config(args)
        config.components_dir.mkdir(parents=True, exist_ok=True)
        if config.skeleton_file.exists() and not getattr(args, "force", False):
            print(f"Skeleton already exists at {config.skeleton_file} (use --force to overwrite)")
            return
        write_file(config.skeleton_file, default_skeleton_text())
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
        return
    print(f"✓ Renderer skeleton written to {config.skeleton_file}")
