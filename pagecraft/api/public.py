"""
Public Page Component Endpoints.

Read-only access to the live components of a page, consumed by the public
site and by static previews.
"""

from fastapi import APIRouter

from pagecraft.api.envelope import ApiResponse
from pagecraft.core.dependencies import DbSession
from pagecraft.services import page_components

router = APIRouter()


@router.get(
    "/page-components/page/{page_key}",
    response_model=ApiResponse,
    summary="Get Page Components",
    description="Active components of a page in render order.",
    tags=["Public"],
)
async def get_page_components(page_key: str, session: DbSession) -> ApiResponse:
    """
    Get the active components of a page.

    Unknown pages return an empty list so consumers can render an empty page.
    """
    components = await page_components.list_components(session, page_key, active_only=True)
    return ApiResponse(
        success=True,
        message=f"{len(components)} component(s)",
        data=[component.to_dict() for component in components],
    )
