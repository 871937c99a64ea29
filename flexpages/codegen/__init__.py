"""Page renderer code generation."""

from .renderer import TemplateSynthesizer
from .skeleton import RendererSections, RendererSkeleton, Slot

__all__ = ["RendererSections", "RendererSkeleton", "Slot", "TemplateSynthesizer"]
