"""
FastAPI Dependencies for PageCraft.

Reusable dependencies for the application context, database sessions and
admin access.
"""

import secrets
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from pagecraft.core.context import AppContext, get_context
from pagecraft.core.database import session_scope
from pagecraft.services.component_registry import ComponentRegistry

# Security scheme for API documentation
admin_key_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)


Context = Annotated[AppContext, Depends(get_context)]


async def get_db_session(context: Context) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database sessions."""
    async for session in session_scope(context.session_factory):
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_registry(context: Context) -> ComponentRegistry:
    return context.registry


Registry = Annotated[ComponentRegistry, Depends(get_registry)]


def admin_key_matches(expected: str, provided: str | None) -> bool:
    """
    Compare an admin key in constant time.

    An empty expected key disables the check.
    """
    if not expected:
        return True
    return secrets.compare_digest((provided or "").encode(), expected.encode())


async def require_admin(
    context: Context,
    api_key: Annotated[str | None, Security(admin_key_header)] = None,
) -> None:
    """
    Require the configured admin key.

    Raises:
        HTTPException: If the key is missing or wrong
    """
    if not admin_key_matches(context.settings.admin_api_key, api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin access required",
            headers={"WWW-Authenticate": "X-Admin-Key"},
        )


AdminAccess = Depends(require_admin)
