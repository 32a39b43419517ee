"""
Preview Endpoints for PageCraft.

Serves full HTML preview documents:

- ``?mode=editor``: live shell that renders only what the editor pushes over
  the preview WebSocket
- otherwise: the persisted page fetched once, with an optional ``?draft=``
  token merged over it
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from pagecraft.core.config import get_settings
from pagecraft.core.dependencies import Context
from pagecraft.middleware.security import limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Preview"])

EDITOR_MODE = "editor"


def preview_rate_limit() -> str:
    return get_settings().preview_rate_limit


@router.get(
    "/preview/{page_key}",
    response_class=HTMLResponse,
    summary="Preview Page",
    description="Render a page preview in live (editor) or draft mode.",
)
@limiter.limit(preview_rate_limit)
async def preview_page(
    request: Request,
    page_key: str,
    context: Context,
    mode: Annotated[str | None, Query(description="'editor' for the live preview shell")] = None,
    draft: Annotated[str | None, Query(description="Draft token with unsaved overrides")] = None,
) -> HTMLResponse:
    """
    Render a preview document.

    Live mode never fetches; the page fills in once the editor's snapshot
    arrives. Draft mode fails open to an empty page on fetch errors and
    ignores undecodable tokens.
    """
    if mode == EDITOR_MODE:
        return HTMLResponse(context.renderer.render_live_shell(page_key))

    html = await context.renderer.render_static(page_key, context.fetcher, draft)
    return HTMLResponse(html)
