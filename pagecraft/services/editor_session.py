"""
Editor Session for PageCraft.

Single source of truth for one page editor: the canonical page snapshot,
the pending-edit overlay and the preview sender. Field edits only touch the
overlay and are previewed instantly; saves persist the merged data and drop
the saved entries from the overlay in one replacement.

Outcomes are reported through the ``notify`` callable handed in by the
connection that owns the session, as ``NOTICE`` and ``EDITOR_STATE``
messages.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pagecraft.services import component_model, overlay as pending
from pagecraft.services import page_components
from pagecraft.services.component_model import MoveDirection, PageCraftError
from pagecraft.services.component_registry import ComponentRegistry
from pagecraft.services.draft_codec import draft_url, encode
from pagecraft.services.preview_bridge import Envelope, PreviewSender, SnapshotTransport

logger = logging.getLogger(__name__)

EditorCommandKind = Literal[
    "FIELD_CHANGE",
    "DISCARD",
    "SAVE",
    "SAVE_ALL",
    "TOGGLE",
    "MOVE",
    "DELETE",
    "DUPLICATE",
    "RELOAD",
    "DRAFT_LINK",
]

_NEEDS_ID = {"FIELD_CHANGE", "DISCARD", "SAVE", "TOGGLE", "MOVE", "DELETE", "DUPLICATE"}


class EditorCommand(BaseModel):
    """Command sent by the editor client."""

    kind: EditorCommandKind
    id: int | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    direction: MoveDirection | None = None


class EditorSession:
    """Editing context for one page on one connection."""

    def __init__(
        self,
        page_key: str,
        origin: str,
        session_factory: async_sessionmaker[AsyncSession],
        transport: SnapshotTransport,
        notify: Callable[[dict[str, Any]], Awaitable[None]],
        public_base_url: str = "",
        registry: ComponentRegistry | None = None,
    ) -> None:
        self.page_key = page_key
        self.origin = origin
        self.page = component_model.Page(key=page_key)
        self.overlay: pending.Overlay = {}
        self.sender = PreviewSender(origin, transport)
        self._session_factory = session_factory
        self._notify = notify
        self._public_base_url = public_base_url
        self.registry = registry or ComponentRegistry()

    # ============== Channel ==============

    async def handle_ready(self, envelope: Envelope, surface: Any) -> int:
        """Answer a surface's readiness announcement with the last snapshot."""
        return await self.sender.on_ready(envelope, surface)

    async def publish(self) -> int:
        """Push the current effective list to every mounted surface."""
        return await self.sender.publish(self.page, self.overlay)

    # ============== Reporting ==============

    async def notice(self, level: Literal["success", "error", "info"], message: str) -> None:
        await self._notify({"kind": "NOTICE", "level": level, "message": message})

    def state(self) -> dict[str, Any]:
        return {
            "kind": "EDITOR_STATE",
            "page_key": self.page_key,
            "components": [
                {
                    **c.model_dump(mode="json"),
                    "label": self.registry.label_for(c.type),
                    "icon": self.registry.icon_for(c.type),
                }
                for c in component_model.sorted_components(self.page)
            ],
            "pending": {str(cid): patch for cid, patch in self.overlay.items()},
            "pending_count": len(self.overlay),
        }

    async def send_state(self) -> None:
        await self._notify(self.state())

    # ============== Lifecycle ==============

    async def start(self) -> None:
        """Load the page, publish the first snapshot and report state."""
        await self.load()
        await self.publish()
        await self.send_state()

    async def load(self) -> None:
        """Reload the canonical page and drop overlay entries that went stale."""
        try:
            async with self._session_factory() as session:
                await page_components.get_page(session, self.page_key)
                page = await page_components.load_page(session, self.page_key)
        except PageCraftError as e:
            await self.notice("error", e.message)
            return
        except SQLAlchemyError as e:
            logger.error(f"Failed to load page '{self.page_key}': {e}")
            await self.notice("error", "Server error loading sections")
            return

        self.page = page
        self.overlay = pending.reconcile(self.overlay, page)

    async def handle(self, message: Any) -> None:
        """
        Run one client command, then publish and report the new state.

        Malformed commands and persistence failures become error notices;
        they never close the connection.
        """
        try:
            command = EditorCommand.model_validate(message)
        except ValidationError as e:
            await self.notice("error", f"Invalid editor command: {e.error_count()} error(s)")
            return

        if command.kind in _NEEDS_ID and command.id is None:
            await self.notice("error", f"{command.kind} requires a component id")
            return

        try:
            await self._dispatch(command)
        except PageCraftError as e:
            await self.notice("error", e.message)
        except SQLAlchemyError as e:
            logger.error(f"Editor command {command.kind} failed on '{self.page_key}': {e}")
            await self.notice("error", "Server error, please retry")

        await self.publish()
        await self.send_state()

    async def _dispatch(self, command: EditorCommand) -> None:
        if command.kind == "FIELD_CHANGE":
            self.change_field(command.id, command.data)
        elif command.kind == "DISCARD":
            self.discard(command.id)
        elif command.kind == "SAVE":
            await self.save_one(command.id)
        elif command.kind == "SAVE_ALL":
            await self.save_all()
        elif command.kind == "TOGGLE":
            await self.toggle_visibility(command.id)
        elif command.kind == "MOVE":
            await self.move_section(command.id, command.direction or MoveDirection.DOWN)
        elif command.kind == "DELETE":
            await self.delete_section(command.id)
        elif command.kind == "DUPLICATE":
            await self.duplicate(command.id)
        elif command.kind == "RELOAD":
            await self.load()
        elif command.kind == "DRAFT_LINK":
            await self.share_draft()

    # ============== Local edits ==============

    def change_field(self, component_id: int, patch: dict[str, Any]) -> None:
        """Record an unsaved edit; previews update without touching the database."""
        self.page.require(component_id)
        self.overlay = pending.apply(self.overlay, component_id, patch)

    def discard(self, component_id: int) -> None:
        self.overlay = pending.discard(self.overlay, component_id)

    # ============== Persisted edits ==============

    async def _persist_data(self, component_id: int, patch: dict[str, Any]) -> dict[str, Any]:
        component = self.page.require(component_id)
        merged = {**component.data, **patch}
        async with self._session_factory() as session:
            await page_components.update_component(session, component_id, component_data=merged)
            await session.commit()
        self.page = component_model.upsert(self.page, component.model_copy(update={"data": merged}))
        return merged

    async def save_one(self, component_id: int) -> None:
        patch = self.overlay.get(component_id)
        if not patch:
            await self.notice("info", "Nothing to save")
            return

        await self._persist_data(component_id, patch)
        self.overlay = pending.discard(self.overlay, component_id)
        await self.notice("success", f"Section {component_id} saved!")

    async def save_all(self) -> None:
        """Persist every pending entry; failed entries stay pending."""
        if not self.overlay:
            await self.notice("info", "Nothing to save")
            return

        saved: list[int] = []
        failed = 0
        for component_id, patch in list(self.overlay.items()):
            try:
                await self._persist_data(component_id, patch)
            except (PageCraftError, SQLAlchemyError) as e:
                logger.warning(f"Saving component {component_id} failed: {e}")
                failed += 1
            else:
                saved.append(component_id)

        self.overlay = pending.without(self.overlay, saved)

        if saved:
            plural = "s" if len(saved) > 1 else ""
            await self.notice("success", f"Saved {len(saved)} section{plural}!")
        if failed:
            plural = "s" if failed > 1 else ""
            await self.notice("error", f"{failed} section{plural} failed to save")

    async def toggle_visibility(self, component_id: int) -> None:
        component = self.page.require(component_id)
        async with self._session_factory() as session:
            await page_components.update_component(
                session, component_id, is_active=not component.active
            )
            await session.commit()
        self.page = component_model.set_active(self.page, component_id, not component.active)

    async def move_section(self, component_id: int, direction: MoveDirection) -> None:
        """Move optimistically, persist the new orders, reload on failure."""
        moved = component_model.move(self.page, component_id, direction)
        if moved == self.page:
            return

        self.page = moved
        await self.publish()
        try:
            async with self._session_factory() as session:
                await page_components.reorder_components(
                    session,
                    ((pair["id"], pair["component_order"]) for pair in component_model.order_pairs(moved)),
                )
                await session.commit()
        except (PageCraftError, SQLAlchemyError) as e:
            logger.warning(f"Reorder on '{self.page_key}' failed: {e}")
            await self.notice("error", "Reorder failed - refreshing…")
            await self.load()

    async def delete_section(self, component_id: int) -> None:
        async with self._session_factory() as session:
            await page_components.delete_component(session, component_id)
            await session.commit()
        self.page = component_model.remove(self.page, component_id)
        self.overlay = pending.reconcile(self.overlay, self.page)
        await self.notice("success", "Section deleted")

    async def duplicate(self, component_id: int) -> None:
        async with self._session_factory() as session:
            await page_components.duplicate_component(session, component_id)
            await session.commit()
        await self.notice("success", "Section duplicated as draft")
        await self.load()

    async def share_draft(self) -> None:
        """Send a shareable link carrying the current overlay."""
        await self._notify(
            {
                "kind": "DRAFT_LINK",
                "token": encode(self.overlay),
                "url": draft_url(self._public_base_url, self.page_key, self.overlay),
            }
        )
