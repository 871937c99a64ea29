"""Component descriptors and their registry."""

from .registry import ComponentDescriptor, ComponentRegistry, FragmentFile

__all__ = ["ComponentDescriptor", "ComponentRegistry", "FragmentFile"]
