"""
WebSocket API Endpoints for PageCraft.

Provides the live preview channel:
- Rendering surfaces that display pushed snapshots
- Editor sessions that edit a page and publish snapshots
- Connection health checks
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from pagecraft.core.context import get_context
from pagecraft.core.dependencies import AdminAccess, Context, admin_key_matches
from pagecraft.services.editor_session import EditorSession
from pagecraft.services.preview_hub import PreviewSurface

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])

KEEPALIVE_SECONDS = 60.0


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def connection_origin(websocket: WebSocket) -> str:
    """
    Origin stamped on every message a connection produces.

    Browsers send an ``Origin`` header on WebSocket handshakes; other clients
    fall back to the origin of the URL they connected to.
    """
    origin = websocket.headers.get("origin")
    if origin:
        return origin
    scheme = "https" if websocket.url.scheme == "wss" else "http"
    return f"{scheme}://{websocket.url.netloc}"


# ============== Preview Surface WebSocket ==============


@router.websocket("/preview/{page_key}")
async def websocket_preview(websocket: WebSocket, page_key: str):
    """
    WebSocket endpoint for a live preview surface.

    Events:
    - Client -> Server: ping (keepalive)
    - Server -> Client: PREVIEW_RENDER (rendered body and receiver state)
    - Server -> Client: pong / ping (keepalive)
    """
    context = get_context(websocket)
    await websocket.accept()

    surface = PreviewSurface(page_key, connection_origin(websocket), websocket.send_json, context.renderer)
    # Mount before registering so the loading body is always pushed first
    await surface.mount()
    await context.hub.register_surface(surface)

    try:
        await context.hub.announce_ready(surface)

        while True:
            try:
                data = await asyncio.wait_for(websocket.receive_text(), timeout=KEEPALIVE_SECONDS)

                if data == "ping":
                    await websocket.send_json({"type": "pong", "timestamp": _timestamp()})

            except asyncio.TimeoutError:
                await websocket.send_json({"type": "ping", "timestamp": _timestamp()})

    except WebSocketDisconnect:
        pass
    finally:
        await context.hub.unregister_surface(surface)


# ============== Editor WebSocket ==============


@router.websocket("/editor/{page_key}")
async def websocket_editor(
    websocket: WebSocket,
    page_key: str,
    key: str | None = Query(default=None, description="Admin key, if not sent as X-Admin-Key"),
):
    """
    WebSocket endpoint for a page editor.

    Authentication: the admin key, when one is configured.

    Events:
    - Client -> Server: editor commands as JSON objects, or ping
    - Server -> Client: EDITOR_STATE after every command
    - Server -> Client: NOTICE for command outcomes
    - Server -> Client: DRAFT_LINK in reply to DRAFT_LINK
    """
    context = get_context(websocket)
    provided = key or websocket.headers.get("x-admin-key")
    if not admin_key_matches(context.settings.admin_api_key, provided):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    session = EditorSession(
        page_key=page_key,
        origin=connection_origin(websocket),
        session_factory=context.session_factory,
        transport=context.hub.transport_for(page_key),
        notify=websocket.send_json,
        public_base_url=context.settings.public_base_url,
        registry=context.registry,
    )
    await context.hub.register_editor(page_key, session)

    try:
        await session.start()

        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_json({"type": "pong", "timestamp": _timestamp()})
                continue

            try:
                message = json.loads(data)
            except ValueError:
                await session.notice("error", "Editor commands must be JSON")
                continue

            await session.handle(message)

    except WebSocketDisconnect:
        logger.info(f"Editor disconnected from '{page_key}'")
    finally:
        await context.hub.unregister_editor(page_key, session)


# ============== Health Check WebSocket ==============


@router.websocket("/health")
async def websocket_health(websocket: WebSocket):
    """
    WebSocket endpoint for connection health checks.

    Does not require authentication.

    Returns:
        WebSocket that responds to ping with pong
    """
    context = get_context(websocket)
    await websocket.accept()

    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_json({
                    "type": "pong",
                    "timestamp": _timestamp(),
                    "connections": {
                        "surfaces": context.hub.surface_count(),
                        "editors": context.hub.editor_count(),
                    },
                })
    except WebSocketDisconnect:
        pass


# ============== Connection Info Endpoint ==============


@router.get("/connections", dependencies=[AdminAccess])
async def get_connection_info(context: Context) -> dict[str, Any]:
    """
    Get information about active preview connections.

    Returns:
        Dictionary with connection statistics
    """
    return {
        "surfaces": context.hub.surface_count(),
        "editors": context.hub.editor_count(),
    }
