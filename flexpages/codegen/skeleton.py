"""
Renderer skeleton parsing and instantiation.

A skeleton is an ordinary page module containing four placeholder lines, each
holding one of the markers below (usually inside a comment so the skeleton
itself stays valid source)::

    // __COMPONENT_IMPORTS__
    // __PAGE_DATA__
    // __COMPONENT_DISPATCH__
    // __PAGE_QUERY__

Instantiating the skeleton replaces each placeholder line with the matching
section of a :class:`RendererSections`, indented like the placeholder.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..errors import SkeletonError
from ..utils import relative_import


class Slot(str, Enum):
    IMPORTS = "__COMPONENT_IMPORTS__"
    DATA = "__PAGE_DATA__"
    DISPATCH = "__COMPONENT_DISPATCH__"
    QUERY = "__PAGE_QUERY__"


_MARKER_RE = re.compile("|".join(re.escape(slot.value) for slot in Slot))
_RELATIVE_IMPORT_RE = re.compile(
    r"""(?P<head>\bfrom\s+|\bimport\s+|\brequire\(\s*)(?P<quote>['"])(?P<spec>\.\.?/[^'"]*)(?P=quote)"""
)


@dataclass(frozen=True)
class RendererSections:
    """The four generated pieces of a page renderer."""

    imports: str
    data_binding: str
    dispatch: str
    query: str

    def for_slot(self, slot: Slot) -> str:
        return {
            Slot.IMPORTS: self.imports,
            Slot.DATA: self.data_binding,
            Slot.DISPATCH: self.dispatch,
            Slot.QUERY: self.query,
        }[slot]


@dataclass(frozen=True)
class RendererSkeleton:
    path: Optional[Path]
    lines: Tuple[str, ...]
    slots: Dict[Slot, int]

    @classmethod
    def parse(cls, text: str, path: Optional[Path] = None) -> "RendererSkeleton":
        lines = tuple(text.splitlines())
        found: Dict[Slot, List[int]] = {slot: [] for slot in Slot}
        for index, line in enumerate(lines):
            for match in _MARKER_RE.finditer(line):
                found[Slot(match.group(0))].append(index)

        location = str(path) if path else None
        missing = [slot.value for slot, indexes in found.items() if not indexes]
        if missing:
            raise SkeletonError(
                f"Renderer skeleton is missing placeholders: {', '.join(missing)}",
                path=location,
                hint="Each placeholder must appear on its own line exactly once.",
            )
        repeated = [slot.value for slot, indexes in found.items() if len(indexes) > 1]
        if repeated:
            raise SkeletonError(
                f"Renderer skeleton repeats placeholders: {', '.join(repeated)}",
                path=location,
            )
        slots = {slot: indexes[0] for slot, indexes in found.items()}
        if len(set(slots.values())) != len(slots):
            raise SkeletonError("Renderer skeleton puts two placeholders on one line", path=location)
        return cls(path=path, lines=lines, slots=slots)

    @classmethod
    def load(cls, path: Path) -> "RendererSkeleton":
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SkeletonError(
                "Renderer skeleton not found",
                path=str(path),
                hint="Run 'flexpages init' to create the default skeleton.",
            ) from exc
        return cls.parse(text, path)

    def rebase_imports(self, output_dir: Path) -> "RendererSkeleton":
        """Rewrite relative module specifiers for a file living in ``output_dir``."""
        if self.path is None:
            return self
        source_dir = self.path.parent

        def rewrite(match: re.Match) -> str:
            target = source_dir / match.group("spec")
            spec = relative_import(target, output_dir)
            return f"{match.group('head')}{match.group('quote')}{spec}{match.group('quote')}"

        lines = tuple(_RELATIVE_IMPORT_RE.sub(rewrite, line) for line in self.lines)
        return replace(self, lines=lines)

    def render(self, sections: RendererSections) -> str:
        by_index = {index: slot for slot, index in self.slots.items()}
        output: List[str] = []
        for index, line in enumerate(self.lines):
            slot = by_index.get(index)
            if slot is None:
                output.append(line)
                continue
            indent = line[: len(line) - len(line.lstrip())]
            section = sections.for_slot(slot).strip("\n")
            output.append(textwrap.indent(section, indent) if section else "")
        return "\n".join(output) + "\n"
