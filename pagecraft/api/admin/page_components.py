"""
Admin Page Component Endpoints.

Provides:
- Listing a page's components (including inactive ones)
- Listing the available section types
- Create, partial update, duplicate and delete
- Bulk reorder
- Shareable draft links for unsaved edits
"""

from typing import Annotated, Any

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from pagecraft.api.envelope import ApiResponse, http_error
from pagecraft.core.dependencies import AdminAccess, Context, DbSession, Registry
from pagecraft.models.page_component import ComponentStatus
from pagecraft.services import page_components
from pagecraft.services.component_model import PageCraftError
from pagecraft.services.draft_codec import draft_url, encode

router = APIRouter(
    prefix="/page-components/admin",
    tags=["Admin Page Components"],
    dependencies=[AdminAccess],
)


# ============== Request/Response Models ==============


class ComponentCreateRequest(BaseModel):
    """Request model for adding a component to a page."""

    page_key: str = Field(..., min_length=1, max_length=100)
    component_type: str = Field(..., min_length=1, max_length=50)
    component_name: str | None = Field(None, max_length=200)
    component_data: dict[str, Any] | None = Field(
        None, description="Section data; defaults to the section's seed data"
    )
    component_order: int | None = Field(None, description="Defaults to the end of the page")
    is_active: bool = True
    status: ComponentStatus = ComponentStatus.ACTIVE


class ComponentUpdateRequest(BaseModel):
    """Request model for partially updating a component."""

    component_data: dict[str, Any] | None = Field(
        None, description="Replaces the stored data wholesale"
    )
    is_active: bool | None = None
    status: ComponentStatus | None = None
    component_name: str | None = Field(None, max_length=200)
    component_order: int | None = None


class ReorderItem(BaseModel):
    id: int
    component_order: int


class ReorderRequest(BaseModel):
    """Request model for bulk reorder."""

    items: list[ReorderItem] = Field(..., min_length=1)


class DraftLinkRequest(BaseModel):
    """Request model for building a shareable draft link."""

    page_key: str = Field(..., min_length=1, max_length=100)
    overlay: dict[int, dict[str, Any]] = Field(default_factory=dict)


# ============== Endpoints ==============


@router.get(
    "",
    response_model=ApiResponse,
    summary="List Page Components",
)
async def list_components(
    session: DbSession,
    page_key: Annotated[str, Query(min_length=1, max_length=100)],
) -> ApiResponse:
    """All components of a page, active or not, in render order."""
    components = await page_components.list_components(session, page_key)
    return ApiResponse(
        message=f"{len(components)} component(s)",
        data=[component.to_dict() for component in components],
    )


@router.get(
    "/sections",
    response_model=ApiResponse,
    summary="List Section Types",
)
async def list_sections(registry: Registry) -> ApiResponse:
    """Section types that can be added to a page, with their default data."""
    definitions = registry.definitions()
    return ApiResponse(
        message=f"{len(definitions)} section type(s)",
        data=[definition.to_dict() for definition in definitions],
    )


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Component",
)
async def create_component(
    request: ComponentCreateRequest,
    session: DbSession,
    registry: Registry,
) -> ApiResponse:
    """Add a component to a page."""
    try:
        component = await page_components.create_component(
            session,
            registry,
            page_key=request.page_key,
            component_type=request.component_type,
            component_name=request.component_name,
            component_data=request.component_data,
            component_order=request.component_order,
            is_active=request.is_active,
            component_status=request.status.value,
        )
    except PageCraftError as e:
        raise http_error(e)

    await session.commit()
    return ApiResponse(message="Component created", data=component.to_dict())


@router.put(
    "/{component_id}",
    response_model=ApiResponse,
    summary="Update Component",
)
async def update_component(
    component_id: int,
    request: ComponentUpdateRequest,
    session: DbSession,
) -> ApiResponse:
    """Partially update a component; omitted fields are left unchanged."""
    changes = request.model_dump(exclude_none=True)
    if "status" in changes:
        changes["status"] = changes["status"].value

    try:
        component = await page_components.update_component(session, component_id, **changes)
    except PageCraftError as e:
        raise http_error(e)

    await session.commit()
    return ApiResponse(message="Component updated", data=component.to_dict())


@router.post(
    "/reorder",
    response_model=ApiResponse,
    summary="Reorder Components",
)
async def reorder_components(request: ReorderRequest, session: DbSession) -> ApiResponse:
    """Apply new orders to several components in one transaction."""
    try:
        updated = await page_components.reorder_components(
            session, ((item.id, item.component_order) for item in request.items)
        )
    except PageCraftError as e:
        raise http_error(e)

    await session.commit()
    return ApiResponse(message=f"Reordered {updated} component(s)", data={"updated": updated})


@router.post(
    "/draft-link",
    response_model=ApiResponse,
    summary="Create Draft Link",
)
async def create_draft_link(request: DraftLinkRequest, context: Context) -> ApiResponse:
    """Encode unsaved edits into a shareable preview link."""
    return ApiResponse(
        message="Draft link created",
        data={
            "token": encode(request.overlay),
            "url": draft_url(context.settings.public_base_url, request.page_key, request.overlay),
        },
    )


@router.post(
    "/{component_id}/duplicate",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Duplicate Component",
)
async def duplicate_component(component_id: int, session: DbSession) -> ApiResponse:
    """Copy a component to the end of its page as an inactive draft."""
    try:
        component = await page_components.duplicate_component(session, component_id)
    except PageCraftError as e:
        raise http_error(e)

    await session.commit()
    return ApiResponse(message="Component duplicated", data=component.to_dict())


@router.delete(
    "/{component_id}",
    response_model=ApiResponse,
    summary="Delete Component",
)
async def delete_component(component_id: int, session: DbSession) -> ApiResponse:
    """Delete a component."""
    try:
        deleted_id = await page_components.delete_component(session, component_id)
    except PageCraftError as e:
        raise http_error(e)

    await session.commit()
    return ApiResponse(message="Component deleted", data={"deleted_id": deleted_id})
