"""
Preview Hub for PageCraft.

In-process message channel between editor sessions and rendering surfaces,
keyed by page. Delivery is fire-and-forget: a surface that fails to receive
is dropped and the failure is logged, never raised to the sender.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from pagecraft.services.preview_bridge import Envelope, PreviewReceiver
from pagecraft.services.preview_renderer import PreviewRenderer

logger = logging.getLogger(__name__)


class PreviewSurface:
    """
    Rendering surface mounted on one client connection.

    Holds the receiver state machine and pushes rendered HTML to the client
    whenever the receiver accepts a snapshot.
    """

    def __init__(
        self,
        page_key: str,
        origin: str,
        send: Callable[[dict[str, Any]], Awaitable[None]],
        renderer: PreviewRenderer,
    ) -> None:
        self.page_key = page_key
        self.receiver = PreviewReceiver(origin)
        self._send = send
        self._renderer = renderer
        self.last_html: str | None = None

    @property
    def origin(self) -> str:
        return self.receiver.origin

    def render_message(self) -> dict[str, Any]:
        html = str(self._renderer.render_surface(self.receiver))
        self.last_html = html
        return {
            "kind": "PREVIEW_RENDER",
            "state": self.receiver.state.value,
            "html": html,
        }

    async def mount(self) -> None:
        """Push the initial (loading) body."""
        await self._send(self.render_message())

    async def deliver(self, envelope: Envelope) -> bool:
        """Hand a message to the receiver and push the result if accepted."""
        if not self.receiver.receive(envelope):
            return False
        await self._send(self.render_message())
        return True


class EditorEndpoint(Protocol):
    """What the hub needs from an editing context."""

    origin: str

    async def handle_ready(self, envelope: Envelope, surface: PreviewSurface) -> int: ...


class PreviewHub:
    """
    Tracks editors and surfaces per page and routes messages between them.
    """

    def __init__(self) -> None:
        self._surfaces: dict[str, set[PreviewSurface]] = {}
        self._editors: dict[str, set[EditorEndpoint]] = {}
        self._lock = asyncio.Lock()

    async def register_surface(self, surface: PreviewSurface) -> None:
        async with self._lock:
            self._surfaces.setdefault(surface.page_key, set()).add(surface)
        logger.info(f"Preview surface mounted for '{surface.page_key}' ({surface.origin})")

    async def unregister_surface(self, surface: PreviewSurface) -> None:
        async with self._lock:
            self._discard(self._surfaces, surface.page_key, surface)
        logger.info(f"Preview surface closed for '{surface.page_key}'")

    async def register_editor(self, page_key: str, editor: EditorEndpoint) -> None:
        async with self._lock:
            self._editors.setdefault(page_key, set()).add(editor)
        logger.info(f"Editor attached to '{page_key}' ({editor.origin})")

    async def unregister_editor(self, page_key: str, editor: EditorEndpoint) -> None:
        async with self._lock:
            self._discard(self._editors, page_key, editor)
        logger.info(f"Editor detached from '{page_key}'")

    @staticmethod
    def _discard(registry: dict[str, set], page_key: str, item: Any) -> None:
        members = registry.get(page_key)
        if members is None:
            return
        members.discard(item)
        if not members:
            del registry[page_key]

    async def post(
        self,
        page_key: str,
        envelope: Envelope,
        target: PreviewSurface | None = None,
    ) -> int:
        """
        Deliver a message to every surface of a page, or to one surface.

        Returns:
            Number of surfaces that accepted the message
        """
        async with self._lock:
            mounted = set(self._surfaces.get(page_key, set()))
        if target is not None:
            targets = [target] if target in mounted else []
        else:
            targets = list(mounted)

        delivered = 0
        failed = []
        for surface in targets:
            try:
                if await surface.deliver(envelope):
                    delivered += 1
            except Exception as e:
                logger.error(f"Preview delivery error for '{page_key}': {e}")
                failed.append(surface)

        if failed:
            async with self._lock:
                for surface in failed:
                    self._discard(self._surfaces, page_key, surface)

        return delivered

    async def announce_ready(self, surface: PreviewSurface) -> int:
        """
        Forward a surface's readiness to the editors of its page.

        Returns:
            Number of snapshots re-sent in response
        """
        envelope = surface.receiver.announce()
        async with self._lock:
            editors = set(self._editors.get(surface.page_key, set()))

        resent = 0
        for editor in editors:
            try:
                resent += await editor.handle_ready(envelope, surface)
            except Exception as e:
                logger.error(f"Readiness handling error for '{surface.page_key}': {e}")
        return resent

    def transport_for(self, page_key: str) -> Callable[[Envelope, Any | None], Awaitable[int]]:
        """Snapshot transport bound to one page, for a ``PreviewSender``."""

        async def transport(envelope: Envelope, target: Any | None = None) -> int:
            return await self.post(page_key, envelope, target)

        return transport

    def surface_count(self, page_key: str | None = None) -> int:
        if page_key is not None:
            return len(self._surfaces.get(page_key, ()))
        return sum(len(members) for members in self._surfaces.values())

    def editor_count(self, page_key: str | None = None) -> int:
        if page_key is not None:
            return len(self._editors.get(page_key, ()))
        return sum(len(members) for members in self._editors.values())
