"""
Admin API Routes Package.

Aggregates the admin endpoints mounted under ``/api/admin``:
- pages: page creation, listing and deletion

Component editing lives under ``/page-components/admin``
(see ``pagecraft.api.admin.page_components``).
"""

from fastapi import APIRouter

from pagecraft.api.admin import pages
from pagecraft.core.dependencies import AdminAccess

# Create main admin router
admin_router = APIRouter(dependencies=[AdminAccess])

# Pages router (already has prefix in its routes)
admin_router.include_router(pages.router)

__all__ = ["admin_router"]
