"""
Preview Renderer for PageCraft.

Turns effective component lists into HTML through the component registry.
Two modes:

- live: the document starts on a loading body and waits for snapshots
  pushed over the preview channel; nothing is fetched
- draft: the canonical page is fetched once, a draft token (if any) is
  merged over it and the result is rendered immediately

Unknown section types and section templates that fail to render become an
inline diagnostic block; the rest of the page still renders.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape
from markupsafe import Markup, escape

from pagecraft.services.component_model import Component, Page, effective_list
from pagecraft.services.component_registry import ComponentRegistry, NotFound
from pagecraft.services.draft_codec import decode_or_empty
from pagecraft.services.page_fetcher import PageFetcher
from pagecraft.services.preview_bridge import PreviewReceiver, ReceiverState

logger = logging.getLogger(__name__)


class PreviewMode(str, Enum):
    """How a preview document gets its components."""

    LIVE = "live"
    DRAFT = "draft"


_INLINE_TAG_RE = re.compile(r"&lt;(/?)(span|strong|em)&gt;|&lt;br\s*/?&gt;")


def inline_html(value: Any) -> Markup:
    """
    Escape a text value, then restore bare inline tags.

    Only attribute-free ``<span>``, ``<strong>``, ``<em>`` and ``<br>`` survive;
    anything else, including tags with attributes, stays escaped.
    """
    escaped = str(escape("" if value is None else value))

    def restore(match: re.Match) -> str:
        if match.group(2) is None:
            return "<br />"
        return f"<{match.group(1)}{match.group(2)}>"

    return Markup(_INLINE_TAG_RE.sub(restore, escaped))


def create_environment() -> Environment:
    """Jinja environment for section and preview templates."""
    env = Environment(
        loader=PackageLoader("pagecraft", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["inline_html"] = inline_html
    return env


class PreviewRenderer:
    """Renders components, surface states and full preview documents."""

    def __init__(self, registry: ComponentRegistry, env: Environment | None = None) -> None:
        self.registry = registry
        self.env = env or create_environment()

    def _render(self, template: str, **context: Any) -> Markup:
        return Markup(self.env.get_template(template).render(**context))

    def render_component(self, component: Component) -> Markup:
        """Render one component, or a diagnostic block if it cannot be."""
        resolution = self.registry.resolve(component.type)
        if isinstance(resolution, NotFound):
            return self._render("preview/unknown.html", component=component)

        try:
            return resolution.definition.render(self.env, component.data)
        except (TemplateError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Section {component.type}#{component.id} failed to render: {e}")
            return self._render("preview/section_error.html", component=component)

    def render_components(self, components: Iterable[Component]) -> Markup:
        """Render active components in order, or the empty-page notice."""
        # Snapshots arrive already filtered; sorting again keeps this safe for any input
        visible = [c for c in sorted(components, key=lambda c: c.order) if c.active]
        if not visible:
            return self._render("preview/empty.html")
        return Markup("\n").join(self.render_component(c) for c in visible)

    def render_waiting(self) -> Markup:
        return self._render("preview/waiting.html")

    def render_surface(self, receiver: PreviewReceiver) -> Markup:
        """Body for a live surface in its current state."""
        if receiver.state == ReceiverState.WAITING:
            return self.render_waiting()
        return self.render_components(receiver.components)

    def render_document(self, page_key: str, body: Markup, mode: PreviewMode) -> str:
        """Wrap a body in the preview HTML document."""
        return self.env.get_template("preview/document.html").render(
            title=f"Preview · {page_key}",
            page_key=page_key,
            mode=mode.value,
            live=mode == PreviewMode.LIVE,
            socket_path=f"/api/ws/preview/{quote(page_key, safe='')}",
            body=body,
        )

    def render_live_shell(self, page_key: str) -> str:
        """Live-mode document: loading body plus the channel client script."""
        return self.render_document(page_key, self.render_waiting(), PreviewMode.LIVE)

    def render_draft(
        self,
        page_key: str,
        components: Iterable[Component],
        overlay: Mapping[int, Mapping[str, Any]] | None = None,
    ) -> str:
        """Draft-mode document for already fetched components."""
        page = Page(key=page_key, components=tuple(components))
        body = self.render_components(effective_list(page, overlay))
        return self.render_document(page_key, body, PreviewMode.DRAFT)

    async def render_static(
        self,
        page_key: str,
        fetcher: PageFetcher,
        draft_token: str | None = None,
    ) -> str:
        """
        Fetch the canonical page, merge the draft token and render.

        A failed fetch renders an empty page; a bad token means no overrides.
        """
        components = await fetcher.fetch(page_key)
        overlay = decode_or_empty(draft_token)
        logger.info(
            f"Rendering draft preview for '{page_key}': "
            f"{len(components)} component(s), {len(overlay)} override(s)"
        )
        return self.render_draft(page_key, components, overlay)
