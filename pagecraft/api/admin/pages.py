"""
Admin Page Endpoints.

Provides:
- Listing pages
- Creating empty pages
- Deleting a page together with its components
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from pagecraft.api.envelope import ApiResponse, http_error
from pagecraft.core.dependencies import DbSession
from pagecraft.services import page_components
from pagecraft.services.component_model import PageCraftError

router = APIRouter(prefix="/pages", tags=["Admin Pages"])


# ============== Request/Response Models ==============


class PageCreateRequest(BaseModel):
    """Request model for creating a page."""

    key: str = Field(
        ...,
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9-]+$",
        description="URL-friendly identifier (lowercase letters, numbers, hyphens)",
    )
    title: str = Field(default="", max_length=200, description="Page title")


# ============== Endpoints ==============


@router.get(
    "",
    response_model=ApiResponse,
    summary="List Pages",
)
async def list_pages(session: DbSession) -> ApiResponse:
    """List all pages ordered by key."""
    pages = await page_components.list_pages(session)
    return ApiResponse(
        message=f"{len(pages)} page(s)",
        data=[page.to_dict() for page in pages],
    )


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Page",
)
async def create_page(request: PageCreateRequest, session: DbSession) -> ApiResponse:
    """Create an empty page."""
    try:
        page = await page_components.create_page(session, request.key, request.title)
    except PageCraftError as e:
        raise http_error(e)

    await session.commit()
    return ApiResponse(message=f"Page '{page.key}' created", data=page.to_dict())


@router.delete(
    "/{page_key}",
    response_model=ApiResponse,
    summary="Delete Page",
)
async def delete_page(page_key: str, session: DbSession) -> ApiResponse:
    """Delete a page and all of its components."""
    try:
        removed = await page_components.delete_page(session, page_key)
    except PageCraftError as e:
        raise http_error(e)

    await session.commit()
    return ApiResponse(
        message=f"Page '{page_key}' deleted",
        data={"page_key": page_key, "components_removed": removed},
    )
