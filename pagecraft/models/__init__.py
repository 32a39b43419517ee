"""
PageCraft Models Package

All SQLAlchemy models for the PageCraft service.
"""

from pagecraft.models.base import Base
from pagecraft.models.page import Page
from pagecraft.models.page_component import ComponentStatus, PageComponent

__all__ = [
    # Base
    "Base",
    # Pages
    "Page",
    "PageComponent",
    "ComponentStatus",
]
