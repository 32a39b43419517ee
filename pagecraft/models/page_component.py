"""
Page component model.

One row per content block on a page. The shape of ``component_data`` is
owned by the section renderer selected by ``component_type``, not by the
database.
"""

import enum
from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pagecraft.models.base import Base, IdentityMixin, TimestampMixin


class ComponentStatus(str, enum.Enum):
    """Editorial status of a component."""

    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


class PageComponent(IdentityMixin, TimestampMixin, Base):
    """Content block placed on a page."""

    __tablename__ = "page_components"
    __table_args__ = (
        Index("ix_page_components_page_order", "page_key", "component_order"),
    )

    page_key: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("pages.key", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    component_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Section renderer tag, e.g. 'hero', 'popular-tools'",
    )

    component_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
        comment="Label shown in the editor sidebar",
    )

    component_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Render position, ascending; need not be contiguous",
    )

    component_data: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Inactive components are kept but never rendered",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ComponentStatus.ACTIVE.value,
        comment="active, draft, archived",
    )

    def to_dict(self) -> dict:
        """Convert component to its wire row."""
        return {
            "id": self.id,
            "page_key": self.page_key,
            "component_type": self.component_type,
            "component_name": self.component_name,
            "component_order": self.component_order,
            "component_data": dict(self.component_data or {}),
            "is_active": self.is_active,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return (
            f"<PageComponent(id={self.id}, page='{self.page_key}', "
            f"type='{self.component_type}', order={self.component_order})>"
        )
