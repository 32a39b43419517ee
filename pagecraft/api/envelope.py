"""
Shared response envelope for PageCraft REST endpoints.
"""

from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel

from pagecraft.services.component_model import PageCraftError


class ApiResponse(BaseModel):
    """Envelope returned by every JSON endpoint."""

    success: bool = True
    message: str = ""
    data: Any = None


def http_error(error: PageCraftError) -> HTTPException:
    """Translate a service error into an HTTP error."""
    return HTTPException(status_code=error.status_code, detail=error.message)
