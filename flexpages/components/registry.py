"""
Component descriptor registry.

Every page component contributes a GraphQL field-selection body describing the
data it renders. Descriptors are registered into a :class:`ComponentRegistry`
either explicitly in code::

    registry = ComponentRegistry()

    @registry.component("Banner")
    def banner_fields() -> str:
        return "title\\ndescription"

or loaded from the components folder, where ``Banner/Banner.graphql`` holds the
body for the ``Banner`` component.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ..errors import MissingDescriptorError
from ..scanner import list_component_dirs

logger = logging.getLogger(__name__)

FieldsProducer = Callable[[], str]


class FragmentFile:
    """Reads a component's fragment body from disk.

    The file is read on every call, so an edit is visible to the next
    aggregation whatever its size or modification time.
    """

    def __init__(self, path: Path, component: str) -> None:
        self.path = path
        self.component = component

    def __call__(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise MissingDescriptorError(
                f"Fragment file for component '{self.component}' is missing",
                self.component,
                path=str(self.path),
            ) from exc


@dataclass(frozen=True)
class ComponentDescriptor:
    """Name plus the GraphQL selection a component needs."""

    name: str
    fields: FieldsProducer
    extra_fields: Tuple[str, ...] = ()
    source: Optional[Path] = None

    def fragment_body(self) -> str:
        parts = [self.fields().strip(), *(extra.strip() for extra in self.extra_fields)]
        return "\n".join(part for part in parts if part)


class ComponentRegistry:
    """Read-mostly table of component descriptors keyed by component name."""

    def __init__(self, descriptors: Iterable[ComponentDescriptor] = ()) -> None:
        self._descriptors: Dict[str, ComponentDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ComponentDescriptor) -> ComponentDescriptor:
        if descriptor.name in self._descriptors:
            raise ValueError(f"Component '{descriptor.name}' is already registered")
        self._descriptors[descriptor.name] = descriptor
        return descriptor

    def component(
        self,
        name: str,
        *,
        extra_fields: Iterable[str] = (),
    ) -> Callable[[FieldsProducer], FieldsProducer]:
        """Decorator registering a fields function under ``name``."""

        def decorator(func: FieldsProducer) -> FieldsProducer:
            self.register(ComponentDescriptor(name=name, fields=func, extra_fields=tuple(extra_fields)))
            return func

        return decorator

    def get(self, name: str) -> ComponentDescriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise MissingDescriptorError(
                f"No descriptor registered for component '{name}'",
                name,
            ) from None

    def names(self) -> List[str]:
        return sorted(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[ComponentDescriptor]:
        for name in self.names():
            yield self._descriptors[name]

    def __len__(self) -> int:
        return len(self._descriptors)

    @classmethod
    def from_directory(
        cls,
        components_dir: Path,
        *,
        suffix: str = ".graphql",
        static: Optional["ComponentRegistry"] = None,
    ) -> "ComponentRegistry":
        """
        Build a registry from the component folders under ``components_dir``.

        Statically registered descriptors win over fragment files. Every other
        folder must contain ``<Name>/<Name><suffix>``; a missing file raises
        :class:`MissingDescriptorError` naming the component.
        """
        registry = cls()
        for name in list_component_dirs(components_dir):
            if static is not None and name in static:
                registry.register(static.get(name))
                continue
            path = components_dir / name / f"{name}{suffix}"
            if not path.is_file():
                raise MissingDescriptorError(
                    f"Component '{name}' has no fragment file",
                    name,
                    path=str(path),
                    hint=f"Create {name}{suffix} with the fields the component renders.",
                )
            registry.register(ComponentDescriptor(name=name, fields=FragmentFile(path, name), source=path))
        logger.debug("Registered %d components from %s", len(registry), components_dir)
        return registry
