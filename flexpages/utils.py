"""Shared helpers for writing generated files."""

from __future__ import annotations

import os
import re
from pathlib import Path

_WHITESPACE_RE = re.compile(r"\s")


def write_file(path: Path, content: str) -> None:
    """Write content to a file, creating parent directories if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_if_changed(path: Path, content: str) -> bool:
    """Write ``content`` unless the file already holds exactly that text."""
    try:
        if path.read_text(encoding="utf-8") == content:
            return False
    except FileNotFoundError:
        pass
    write_file(path, content)
    return True


def slugify_template_name(name: str) -> str:
    """Lowercase a template name and turn each whitespace character into a hyphen.

    >>> slugify_template_name("Team Grid")
    'team-grid'
    """
    return _WHITESPACE_RE.sub("-", name.lower())


def relative_import(target: Path, from_dir: Path) -> str:
    """Return a POSIX relative module specifier for ``target`` as seen from ``from_dir``."""
    relative = Path(os.path.relpath(target, from_dir)).as_posix()
    if not relative.startswith("."):
        relative = f"./{relative}"
    return relative
