"""
Preview Bridge Protocol for PageCraft.

One-way, connectionless snapshot channel from an editing context to a
rendering surface. Messages carry no acknowledgement and may be lost before
a surface exists, so the protocol adds a readiness handshake:

    surface                         editor
    -------                         ------
    mount (WAITING)
    PREVIEW_READY  ───────────────▶ re-send last snapshot
                   ◀─────────────── PREVIEW_INIT {components}
    READY (replace list)
                   ◀─────────────── PREVIEW_INIT on every edit

Snapshots always carry the full effective component list. Receivers drop
every message whose origin differs from their own.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from pagecraft.services.component_model import Component, Page, effective_list

logger = logging.getLogger(__name__)


class MessageKind(str, Enum):
    """Message kinds exchanged over the preview channel."""

    PREVIEW_INIT = "PREVIEW_INIT"
    PREVIEW_READY = "PREVIEW_READY"


class PreviewInit(BaseModel):
    """Full snapshot pushed from the editor to rendering surfaces."""

    kind: Literal["PREVIEW_INIT"] = "PREVIEW_INIT"
    components: list[Component] = Field(default_factory=list)


class PreviewReady(BaseModel):
    """Announcement sent by a surface once it has mounted."""

    kind: Literal["PREVIEW_READY"] = "PREVIEW_READY"


@dataclass(frozen=True)
class Envelope:
    """A message as seen by its recipient: payload plus sender origin."""

    origin: str
    payload: Mapping[str, Any]

    @property
    def kind(self) -> str | None:
        kind = self.payload.get("kind") if isinstance(self.payload, Mapping) else None
        return kind if isinstance(kind, str) else None


def init_message(components: Iterable[Component]) -> dict[str, Any]:
    """Build the wire form of a ``PREVIEW_INIT`` snapshot."""
    return PreviewInit(components=list(components)).model_dump(mode="json")


def ready_message() -> dict[str, Any]:
    """Build the wire form of a ``PREVIEW_READY`` announcement."""
    return PreviewReady().model_dump(mode="json")


class ReceiverState(str, Enum):
    """Rendering surface state."""

    WAITING = "WAITING"  # mounted, nothing to render yet
    READY = "READY"  # holds a snapshot; never leaves this state


class PreviewReceiver:
    """
    Receiving end of the preview channel.

    Starts in ``WAITING``; the first accepted snapshot moves it to ``READY``
    and every later snapshot replaces the held list wholesale.
    """

    def __init__(self, origin: str) -> None:
        self.origin = origin
        self.state = ReceiverState.WAITING
        self._components: list[Component] = []

    @property
    def components(self) -> list[Component]:
        return list(self._components)

    def receive(self, envelope: Envelope) -> bool:
        """
        Apply an incoming message.

        Returns:
            True if the message was accepted and the held list replaced
        """
        if envelope.origin != self.origin:
            logger.debug(f"Dropped preview message from foreign origin {envelope.origin!r}")
            return False

        if envelope.kind != MessageKind.PREVIEW_INIT.value:
            return False

        try:
            message = PreviewInit.model_validate(envelope.payload)
        except ValidationError as e:
            logger.warning(f"Dropped malformed preview snapshot: {e.error_count()} error(s)")
            return False

        self._components = list(message.components)
        self.state = ReceiverState.READY
        return True

    def announce(self) -> Envelope:
        """Readiness announcement to send once mounted."""
        return Envelope(origin=self.origin, payload=ready_message())


# (envelope, target surface or None for every surface) -> deliveries
SnapshotTransport = Callable[[Envelope, Any | None], Awaitable[int]]


class PreviewSender:
    """
    Sending end of the preview channel.

    Remembers the last published snapshot so it can answer readiness
    announcements from surfaces that mounted after it was sent.
    """

    def __init__(self, origin: str, transport: SnapshotTransport) -> None:
        self.origin = origin
        self._transport = transport
        self._last_snapshot: dict[str, Any] | None = None

    @property
    def last_snapshot(self) -> dict[str, Any] | None:
        return self._last_snapshot

    @staticmethod
    def snapshot(
        page: Page,
        overlay: Mapping[int, Mapping[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Full snapshot of the effective list for a page and overlay."""
        return init_message(effective_list(page, overlay))

    async def publish(
        self,
        page: Page,
        overlay: Mapping[int, Mapping[str, Any]] | None = None,
    ) -> int:
        """
        Recompute and broadcast the full snapshot.

        Returns:
            Number of surfaces that accepted it (0 if none is mounted yet)
        """
        self._last_snapshot = self.snapshot(page, overlay)
        return await self._transport(Envelope(self.origin, self._last_snapshot), None)

    async def on_ready(self, envelope: Envelope, target: Any) -> int:
        """Re-send the last snapshot to a surface that announced readiness."""
        if envelope.origin != self.origin:
            logger.debug(f"Ignored readiness from foreign origin {envelope.origin!r}")
            return 0
        if envelope.kind != MessageKind.PREVIEW_READY.value or self._last_snapshot is None:
            return 0
        return await self._transport(Envelope(self.origin, self._last_snapshot), target)
