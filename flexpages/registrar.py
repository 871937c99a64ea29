"""Decide each page's renderer and hand it to the site builder."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Union

from .codegen.renderer import TemplateSynthesizer
from .config import PluginConfig
from .errors import MissingTemplateError
from .graphql.naming import TypeNaming
from .models import ContentPage
from .utils import slugify_template_name

logger = logging.getLogger(__name__)

RegisterPage = Callable[[Dict[str, Any]], Union[None, Any, Awaitable[Any]]]


@dataclass
class PageRegistration:
    path: str
    component: Path
    context: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "component": str(self.component), "context": dict(self.context)}


def unique_component_names(page: ContentPage, naming: TypeNaming) -> List[str]:
    """Distinct component names on ``page``, sorted alphabetically."""
    return sorted(
        {naming.component_name(instance.typename, page.content_type) for instance in page.components}
    )


class PageRegistrar:
    """
    Registers one site page per content record.

    * fixed-template content types use their configured renderer,
    * pages on the default template get a synthesized renderer,
    * any other template name resolves to ``<templates_dir>/<slug>.js``.
    """

    def __init__(
        self,
        config: PluginConfig,
        synthesizer: TemplateSynthesizer,
        register_page: RegisterPage,
    ) -> None:
        self.config = config
        self.synthesizer = synthesizer
        self._register_page = register_page

    async def register_all(self, pages: Iterable[ContentPage]) -> List[PageRegistration]:
        return list(await asyncio.gather(*(self.register(page) for page in pages)))

    async def register(self, page: ContentPage) -> PageRegistration:
        registration = await self.resolve(page)
        result = self._register_page(registration.as_dict())
        if inspect.isawaitable(result):
            await result
        logger.debug("Registered %s -> %s", registration.path, registration.component)
        return registration

    async def resolve(self, page: ContentPage) -> PageRegistration:
        fixed = self.config.fixed_templates.get(page.content_type)
        if fixed is not None:
            return PageRegistration(
                path=page.uri,
                component=self._static_template(fixed, fixed),
                context={"id": page.id},
            )

        template = page.template_name or self.config.default_template
        if template == self.config.default_template:
            names = self.known_component_names(page)
            component = await asyncio.to_thread(
                self.synthesizer.synthesize,
                page.database_id,
                page.content_type,
                page.slug,
                names,
            )
            return PageRegistration(path=page.uri, component=component, context={"id": page.id})

        return PageRegistration(
            path=page.uri,
            component=self._static_template(template, slugify_template_name(template)),
            context={"title": page.title, "id": page.id},
        )

    def known_component_names(self, page: ContentPage) -> List[str]:
        names = unique_component_names(page, self.config.naming)
        known = self.synthesizer.fragments.components
        unknown = [name for name in names if name not in known]
        if unknown:
            logger.warning(
                "Page %s uses unknown components %s; they will render as 'not found'",
                page.uri,
                ", ".join(unknown),
            )
        return [name for name in names if name in known]

    def _static_template(self, template_name: str, file_stem: str) -> Path:
        path = self.config.templates_dir / f"{file_stem}.js"
        if not path.is_file():
            raise MissingTemplateError(
                f"No renderer for template '{template_name}'",
                template_name,
                path=str(path),
                hint=f"Create {path.name} in {self.config.templates_dir}.",
            )
        return path
