"""
Component Registry for PageCraft.

Closed set of known section types. Each ``ComponentType`` is backed by a
section module under ``pagecraft.sections`` exposing a ``SECTION``
definition; modules are imported the first time their type is resolved and
cached afterwards, so building the registry costs nothing per section.

Resolution is total: ``resolve`` returns ``Found`` or ``NotFound`` and never
raises, leaving the caller free to render a diagnostic for unknown types.

Adding a section type:
1. Create ``pagecraft/sections/<name>.py`` exporting ``SECTION``
2. Add its template under ``pagecraft/templates/sections/``
3. Add a ``ComponentType`` member and its module path below
"""

import importlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from jinja2 import Environment
from markupsafe import Markup

logger = logging.getLogger(__name__)


class ComponentType(str, Enum):
    """Known section types, matching ``component_type`` in the database."""

    HERO = "hero"
    POPULAR_TOOLS = "popular-tools"
    WHY_CHOOSE_US = "why-choose-us"
    HOW_IT_WORKS = "how-it-works"
    FINAL_CTA = "final-cta"
    SEO_CONTENT = "seo-content"
    NAVBAR = "navbar"
    FOOTER = "footer"


SECTION_MODULES: dict[ComponentType, str] = {
    ComponentType.HERO: "pagecraft.sections.hero",
    ComponentType.POPULAR_TOOLS: "pagecraft.sections.popular_tools",
    ComponentType.WHY_CHOOSE_US: "pagecraft.sections.why_choose_us",
    ComponentType.HOW_IT_WORKS: "pagecraft.sections.how_it_works",
    ComponentType.FINAL_CTA: "pagecraft.sections.final_cta",
    ComponentType.SEO_CONTENT: "pagecraft.sections.seo_content",
    ComponentType.NAVBAR: "pagecraft.sections.navbar",
    ComponentType.FOOTER: "pagecraft.sections.footer",
}

DEFAULT_ICON = "📦"


@dataclass(frozen=True)
class SectionDefinition:
    """Render contract shared by every section type."""

    type: str
    label: str
    icon: str
    template: str
    default_data: dict[str, Any] = field(default_factory=dict)

    def render(self, env: Environment, data: Mapping[str, Any]) -> Markup:
        """Render the section with its data shallow-merged over the defaults."""
        template = env.get_template(self.template)
        return Markup(template.render(data={**self.default_data, **data}, section=self))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "label": self.label,
            "icon": self.icon,
            "default_data": self.default_data,
        }


@dataclass(frozen=True)
class Found:
    """Resolution outcome for a known type."""

    definition: SectionDefinition


@dataclass(frozen=True)
class NotFound:
    """Resolution outcome for a type with no renderer."""

    type: str


Resolution = Found | NotFound


class ComponentRegistry:
    """Lazy, cached lookup from component type to section definition."""

    def __init__(self, modules: Mapping[ComponentType, str] | None = None) -> None:
        self._modules: dict[ComponentType, str] = dict(
            SECTION_MODULES if modules is None else modules
        )
        self._loaded: dict[str, SectionDefinition] = {}

    def resolve(self, component_type: str) -> Resolution:
        """
        Look up the renderer for a component type.

        Args:
            component_type: Raw ``component_type`` value

        Returns:
            ``Found`` with the section definition, or ``NotFound``
        """
        cached = self._loaded.get(component_type)
        if cached is not None:
            return Found(cached)

        try:
            known = ComponentType(component_type)
        except ValueError:
            return NotFound(str(component_type))

        module_path = self._modules.get(known)
        if module_path is None:
            return NotFound(known.value)

        try:
            module = importlib.import_module(module_path)
            definition = module.SECTION
        except (ImportError, AttributeError) as e:
            logger.error(f"Failed to load section '{known.value}' from {module_path}: {e}")
            return NotFound(known.value)

        self._loaded[known.value] = definition
        logger.debug(f"Loaded section '{known.value}'")
        return Found(definition)

    def get(self, component_type: str) -> SectionDefinition | None:
        """Return the definition for a type, or None if unregistered."""
        resolution = self.resolve(component_type)
        return resolution.definition if isinstance(resolution, Found) else None

    def label_for(self, component_type: str) -> str:
        """Sidebar label for a type, falling back to the raw type."""
        definition = self.get(component_type)
        return definition.label if definition else component_type

    def icon_for(self, component_type: str) -> str:
        definition = self.get(component_type)
        return definition.icon if definition else DEFAULT_ICON

    def definitions(self) -> list[SectionDefinition]:
        """All registered definitions, e.g. for "add section" pickers."""
        return [
            definition
            for definition in (self.get(member.value) for member in self._modules)
            if definition is not None
        ]
