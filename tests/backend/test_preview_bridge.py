"""
Preview Channel Tests for PageCraft.

Tests for:
- Receiver state machine and origin checks
- Sender snapshots and readiness re-send
- Hub delivery between editors and surfaces, in both mount orders
"""

from unittest.mock import AsyncMock

import pytest

from pagecraft.services.component_model import Component, Page
from pagecraft.services.component_registry import ComponentRegistry
from pagecraft.services.preview_bridge import (
    Envelope,
    PreviewReceiver,
    PreviewSender,
    ReceiverState,
    init_message,
    ready_message,
)
from pagecraft.services.preview_hub import PreviewHub, PreviewSurface
from pagecraft.services.preview_renderer import PreviewRenderer

ORIGIN = "http://cms.local"
FOREIGN = "http://evil.local"


def sample_page() -> Page:
    return Page.from_components(
        "home",
        [
            Component(id=1, type="hero", data={"title": "Hello"}, order=2),
            Component(id=2, type="footer", order=1, active=False),
            Component(id=3, type="navbar", order=1),
        ],
    )


def make_surface(send=None, origin: str = ORIGIN, page_key: str = "home") -> PreviewSurface:
    return PreviewSurface(page_key, origin, send or AsyncMock(), PreviewRenderer(ComponentRegistry()))


# ============== Receiver Tests ==============


class TestPreviewReceiver:
    """Tests for the receiving end."""

    def test_starts_waiting(self):
        """Test that a new receiver holds nothing."""
        receiver = PreviewReceiver(ORIGIN)

        assert receiver.state == ReceiverState.WAITING
        assert receiver.components == []

    def test_accepts_snapshot(self):
        """Test that a same-origin snapshot moves the receiver to READY."""
        receiver = PreviewReceiver(ORIGIN)
        components = [Component(id=1, type="hero", order=1)]

        accepted = receiver.receive(Envelope(ORIGIN, init_message(components)))

        assert accepted is True
        assert receiver.state == ReceiverState.READY
        assert receiver.components == components

    def test_cross_origin_dropped(self):
        """Test that foreign-origin snapshots are ignored."""
        receiver = PreviewReceiver(ORIGIN)

        accepted = receiver.receive(
            Envelope(FOREIGN, init_message([Component(id=9, type="hero")]))
        )

        assert accepted is False
        assert receiver.state == ReceiverState.WAITING
        assert receiver.components == []

    @pytest.mark.parametrize(
        "payload",
        [
            ready_message(),
            {"kind": "SOMETHING_ELSE"},
            {"components": []},
            {"kind": "PREVIEW_INIT", "components": [{"id": "x"}]},
            {"kind": "PREVIEW_INIT", "components": "nope"},
        ],
    )
    def test_other_messages_ignored(self, payload):
        """Test that non-snapshot and malformed messages leave state alone."""
        receiver = PreviewReceiver(ORIGIN)

        assert receiver.receive(Envelope(ORIGIN, payload)) is False
        assert receiver.state == ReceiverState.WAITING

    def test_repeat_snapshot_is_idempotent(self):
        """Test that receiving the same snapshot twice gives the same state."""
        receiver = PreviewReceiver(ORIGIN)
        message = Envelope(ORIGIN, init_message([Component(id=1, type="hero", order=1)]))

        receiver.receive(message)
        first = receiver.components
        receiver.receive(message)

        assert receiver.components == first
        assert receiver.state == ReceiverState.READY

    def test_snapshot_replaces_wholesale(self):
        """Test that a later snapshot replaces, never merges."""
        receiver = PreviewReceiver(ORIGIN)
        receiver.receive(Envelope(ORIGIN, init_message([Component(id=1, type="hero")])))

        receiver.receive(Envelope(ORIGIN, init_message([])))

        assert receiver.components == []
        assert receiver.state == ReceiverState.READY

    def test_announce(self):
        """Test the readiness announcement carries the receiver's origin."""
        envelope = PreviewReceiver(ORIGIN).announce()

        assert envelope.origin == ORIGIN
        assert envelope.kind == "PREVIEW_READY"


# ============== Sender Tests ==============


class TestPreviewSender:
    """Tests for the sending end."""

    def test_snapshot_is_effective_list(self):
        """Test that snapshots carry active components, sorted, with overlay merged."""
        snapshot = PreviewSender.snapshot(sample_page(), {1: {"title": "Edited"}})

        assert snapshot["kind"] == "PREVIEW_INIT"
        assert [c["id"] for c in snapshot["components"]] == [3, 1]
        assert snapshot["components"][1]["data"] == {"title": "Edited"}

    @pytest.mark.asyncio
    async def test_publish_remembers_last_snapshot(self):
        """Test that publishing broadcasts and stores the snapshot."""
        transport = AsyncMock(return_value=0)
        sender = PreviewSender(ORIGIN, transport)

        await sender.publish(sample_page())

        envelope, target = transport.await_args.args
        assert envelope.origin == ORIGIN
        assert target is None
        assert sender.last_snapshot == envelope.payload

    @pytest.mark.asyncio
    async def test_ready_before_publish_is_ignored(self):
        """Test that a readiness announcement with nothing published sends nothing."""
        transport = AsyncMock(return_value=1)
        sender = PreviewSender(ORIGIN, transport)

        sent = await sender.on_ready(PreviewReceiver(ORIGIN).announce(), object())

        assert sent == 0
        transport.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ready_resends_to_target(self):
        """Test that readiness triggers a targeted re-send of the last snapshot."""
        transport = AsyncMock(return_value=1)
        sender = PreviewSender(ORIGIN, transport)
        await sender.publish(sample_page())
        target = object()

        sent = await sender.on_ready(PreviewReceiver(ORIGIN).announce(), target)

        assert sent == 1
        envelope, sent_to = transport.await_args.args
        assert sent_to is target
        assert envelope.payload == sender.last_snapshot

    @pytest.mark.asyncio
    async def test_foreign_ready_ignored(self):
        """Test that readiness from another origin is ignored."""
        transport = AsyncMock(return_value=1)
        sender = PreviewSender(ORIGIN, transport)
        await sender.publish(sample_page())
        transport.reset_mock()

        sent = await sender.on_ready(PreviewReceiver(FOREIGN).announce(), object())

        assert sent == 0
        transport.assert_not_awaited()


# ============== Hub Tests ==============


class TestPreviewHub:
    """Tests for in-process delivery."""

    @pytest.mark.asyncio
    async def test_surface_mounted_first(self):
        """Test the ordinary order: surface waits, then the editor publishes."""
        hub = PreviewHub()
        send = AsyncMock()
        surface = make_surface(send)
        await surface.mount()
        await hub.register_surface(surface)
        sender = PreviewSender(ORIGIN, hub.transport_for("home"))

        delivered = await sender.publish(sample_page())

        assert delivered == 1
        assert surface.receiver.state == ReceiverState.READY
        assert [c.id for c in surface.receiver.components] == [3, 1]
        states = [call.args[0]["state"] for call in send.await_args_list]
        assert states == ["WAITING", "READY"]

    @pytest.mark.asyncio
    async def test_editor_published_first(self):
        """Test that a surface mounted after the publish still gets the snapshot."""
        hub = PreviewHub()

        class Editor:
            origin = ORIGIN

            def __init__(self):
                self.sender = PreviewSender(ORIGIN, hub.transport_for("home"))

            async def handle_ready(self, envelope, surface):
                return await self.sender.on_ready(envelope, surface)

        editor = Editor()
        await hub.register_editor("home", editor)
        assert await editor.sender.publish(sample_page()) == 0

        surface = make_surface()
        await surface.mount()
        await hub.register_surface(surface)
        resent = await hub.announce_ready(surface)

        assert resent == 1
        assert surface.receiver.state == ReceiverState.READY
        assert [c.id for c in surface.receiver.components] == [3, 1]

    @pytest.mark.asyncio
    async def test_cross_origin_surface_not_updated(self):
        """Test that a surface on another origin ignores the snapshot."""
        hub = PreviewHub()
        surface = make_surface(origin=FOREIGN)
        await hub.register_surface(surface)

        delivered = await PreviewSender(ORIGIN, hub.transport_for("home")).publish(sample_page())

        assert delivered == 0
        assert surface.receiver.state == ReceiverState.WAITING

    @pytest.mark.asyncio
    async def test_pages_are_isolated(self):
        """Test that snapshots only reach surfaces of the same page."""
        hub = PreviewHub()
        other = make_surface(page_key="pricing")
        await hub.register_surface(other)

        await PreviewSender(ORIGIN, hub.transport_for("home")).publish(sample_page())

        assert other.receiver.state == ReceiverState.WAITING

    @pytest.mark.asyncio
    async def test_failed_surface_dropped(self):
        """Test that a surface whose send fails is removed and not raised."""
        hub = PreviewHub()
        broken = make_surface(AsyncMock(side_effect=RuntimeError("socket closed")))
        healthy = make_surface()
        await hub.register_surface(broken)
        await hub.register_surface(healthy)

        delivered = await PreviewSender(ORIGIN, hub.transport_for("home")).publish(sample_page())

        assert delivered == 1
        assert hub.surface_count("home") == 1

    @pytest.mark.asyncio
    async def test_unregister(self):
        """Test connection counting across register and unregister."""
        hub = PreviewHub()
        surface = make_surface()
        editor = AsyncMock()
        editor.origin = ORIGIN

        await hub.register_surface(surface)
        await hub.register_editor("home", editor)
        assert (hub.surface_count(), hub.editor_count("home")) == (1, 1)

        await hub.unregister_surface(surface)
        await hub.unregister_editor("home", editor)
        assert (hub.surface_count(), hub.editor_count()) == (0, 0)
