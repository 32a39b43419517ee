"""
Page model.

A page is a key plus the ordered set of its components. Pages are created
empty by an admin and filled through the page component endpoints.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from pagecraft.models.base import Base, IdentityMixin, TimestampMixin


class Page(IdentityMixin, TimestampMixin, Base):
    """Page addressed by a URL-friendly key."""

    __tablename__ = "pages"

    key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="URL-friendly identifier (e.g., 'home', 'pricing')",
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
        comment="Human-readable page title shown in the admin",
    )

    def to_dict(self) -> dict:
        """Convert page to dictionary for API responses."""
        return {
            "id": self.id,
            "key": self.key,
            "title": self.title,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Page(key='{self.key}', title='{self.title}')>"
