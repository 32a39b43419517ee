"""
Page Component Service for PageCraft.

Database operations behind the admin endpoints and the editor session:
page creation and lookup, component CRUD, duplication, bulk reorder and
seeding. Functions flush but never commit; the caller owns the transaction.
"""

import logging
from collections.abc import Iterable
from typing import Any

from fastapi import status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pagecraft.models.page import Page as PageRecord
from pagecraft.models.page_component import ComponentStatus, PageComponent
from pagecraft.services import component_model
from pagecraft.services.component_model import ComponentNotFoundError, PageCraftError
from pagecraft.services.component_registry import ComponentRegistry, ComponentType

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"component_data", "is_active", "status", "component_name", "component_order"}
)

# Landing page layout used when seeding a new page
DEFAULT_LAYOUT = (
    ComponentType.NAVBAR,
    ComponentType.HERO,
    ComponentType.POPULAR_TOOLS,
    ComponentType.WHY_CHOOSE_US,
    ComponentType.HOW_IT_WORKS,
    ComponentType.FINAL_CTA,
    ComponentType.SEO_CONTENT,
    ComponentType.FOOTER,
)


class PageNotFoundError(PageCraftError):
    """Raised when a page key does not exist."""

    def __init__(self, page_key: str):
        self.page_key = page_key
        super().__init__(f"Page '{page_key}' not found", status_code=status.HTTP_404_NOT_FOUND)


class PageExistsError(PageCraftError):
    """Raised when creating a page whose key is taken."""

    def __init__(self, page_key: str):
        self.page_key = page_key
        super().__init__(
            f"Page with key '{page_key}' already exists",
            status_code=status.HTTP_409_CONFLICT,
        )


class InvalidComponentError(PageCraftError):
    """Raised for component payloads the service cannot accept."""

    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


async def _save(session: AsyncSession, record: Any) -> None:
    await session.flush()
    await session.refresh(record)


# ============== Pages ==============


async def list_pages(session: AsyncSession) -> list[PageRecord]:
    """Return all pages ordered by key."""
    result = await session.execute(select(PageRecord).order_by(PageRecord.key))
    return list(result.scalars().all())


async def get_page(session: AsyncSession, page_key: str) -> PageRecord:
    """Return a page by key or raise ``PageNotFoundError``."""
    result = await session.execute(select(PageRecord).where(PageRecord.key == page_key))
    page = result.scalar_one_or_none()
    if page is None:
        raise PageNotFoundError(page_key)
    return page


async def create_page(session: AsyncSession, page_key: str, title: str = "") -> PageRecord:
    """Create an empty page."""
    existing = await session.execute(select(PageRecord.id).where(PageRecord.key == page_key))
    if existing.scalar_one_or_none() is not None:
        raise PageExistsError(page_key)

    page = PageRecord(key=page_key, title=title)
    session.add(page)
    await _save(session, page)
    logger.info(f"Created page '{page_key}'")
    return page


async def delete_page(session: AsyncSession, page_key: str) -> int:
    """
    Delete a page and all of its components.

    Returns:
        Number of components removed with the page
    """
    await get_page(session, page_key)
    result = await session.execute(
        delete(PageComponent).where(PageComponent.page_key == page_key)
    )
    await session.execute(delete(PageRecord).where(PageRecord.key == page_key))
    await session.flush()
    logger.info(f"Deleted page '{page_key}' with {result.rowcount} component(s)")
    return result.rowcount


# ============== Components ==============


async def list_components(
    session: AsyncSession,
    page_key: str,
    active_only: bool = False,
) -> list[PageComponent]:
    """
    Return the components of a page in render order.

    Ties on ``component_order`` are broken by id, i.e. insertion order.
    """
    query = select(PageComponent).where(PageComponent.page_key == page_key)
    if active_only:
        query = query.where(PageComponent.is_active == True)  # noqa: E712
    query = query.order_by(PageComponent.component_order, PageComponent.id)
    result = await session.execute(query)
    return list(result.scalars().all())


async def load_page(session: AsyncSession, page_key: str) -> component_model.Page:
    """Load the canonical in-memory page used by the editor."""
    rows = await list_components(session, page_key)
    return component_model.Page.from_components(
        page_key, (component_model.Component.from_row(row.to_dict()) for row in rows)
    )


async def get_component(session: AsyncSession, component_id: int) -> PageComponent:
    """Return a component by id or raise ``ComponentNotFoundError``."""
    component = await session.get(PageComponent, component_id)
    if component is None:
        raise ComponentNotFoundError(component_id)
    return component


async def _next_order(session: AsyncSession, page_key: str) -> int:
    result = await session.execute(
        select(func.max(PageComponent.component_order)).where(PageComponent.page_key == page_key)
    )
    current = result.scalar()
    return (current or 0) + 1


async def create_component(
    session: AsyncSession,
    registry: ComponentRegistry,
    page_key: str,
    component_type: str,
    component_name: str | None = None,
    component_data: dict[str, Any] | None = None,
    component_order: int | None = None,
    is_active: bool = True,
    component_status: str = ComponentStatus.ACTIVE.value,
) -> PageComponent:
    """
    Add a component to a page.

    Data defaults to the section's seed data and order to the end of the
    page.

    Raises:
        PageNotFoundError: If the page does not exist
        InvalidComponentError: If the type has no registered section
    """
    await get_page(session, page_key)

    definition = registry.get(component_type)
    if definition is None:
        raise InvalidComponentError(f"Unknown component type '{component_type}'")

    if component_order is None:
        component_order = await _next_order(session, page_key)

    component = PageComponent(
        page_key=page_key,
        component_type=component_type,
        component_name=component_name or definition.label,
        component_order=component_order,
        component_data=dict(definition.default_data if component_data is None else component_data),
        is_active=is_active,
        status=ComponentStatus(component_status).value,
    )
    session.add(component)
    await _save(session, component)
    logger.info(f"Created {component_type} component {component.id} on '{page_key}'")
    return component


async def update_component(
    session: AsyncSession,
    component_id: int,
    **changes: Any,
) -> PageComponent:
    """
    Partially update a component.

    Only ``component_data``, ``is_active``, ``status``, ``component_name``
    and ``component_order`` may change; ``None`` values are ignored.
    ``component_data`` replaces the stored data wholesale.
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise InvalidComponentError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    component = await get_component(session, component_id)
    for field, value in changes.items():
        if value is None:
            continue
        if field == "status":
            value = ComponentStatus(value).value
        if field == "component_data":
            value = dict(value)
        setattr(component, field, value)

    await _save(session, component)
    return component


async def duplicate_component(session: AsyncSession, component_id: int) -> PageComponent:
    """Copy a component to the end of its page as an inactive draft."""
    source = await get_component(session, component_id)
    copy = PageComponent(
        page_key=source.page_key,
        component_type=source.component_type,
        component_name=f"{source.component_name} (copy)",
        component_order=await _next_order(session, source.page_key),
        component_data=dict(source.component_data or {}),
        is_active=False,
        status=ComponentStatus.DRAFT.value,
    )
    session.add(copy)
    await _save(session, copy)
    logger.info(f"Duplicated component {component_id} as {copy.id}")
    return copy


async def delete_component(session: AsyncSession, component_id: int) -> int:
    """Delete a component and return its id."""
    component = await get_component(session, component_id)
    await session.delete(component)
    await session.flush()
    logger.info(f"Deleted component {component_id}")
    return component_id


async def reorder_components(
    session: AsyncSession,
    items: Iterable[tuple[int, int]],
) -> int:
    """
    Apply ``(id, component_order)`` pairs in one transaction.

    Raises:
        ComponentNotFoundError: If any id does not exist; nothing is changed
    """
    orders = dict(items)
    if not orders:
        return 0

    result = await session.execute(select(PageComponent).where(PageComponent.id.in_(orders)))
    components = {c.id: c for c in result.scalars().all()}
    missing = sorted(set(orders) - set(components))
    if missing:
        raise ComponentNotFoundError(missing[0])

    for component_id, order in orders.items():
        components[component_id].component_order = order
    await session.flush()
    for component in components.values():
        await session.refresh(component)
    return len(orders)


async def seed_page(
    session: AsyncSession,
    registry: ComponentRegistry,
    page_key: str,
    title: str = "",
    layout: Iterable[str] = DEFAULT_LAYOUT,
) -> list[PageComponent]:
    """
    Create a page filled with sections using their default data.

    Raises:
        PageExistsError: If the page already exists
    """
    await create_page(session, page_key, title)
    components = []
    for order, component_type in enumerate(layout, start=1):
        components.append(
            await create_component(
                session, registry, page_key, ComponentType(component_type).value, component_order=order
            )
        )
    logger.info(f"Seeded page '{page_key}' with {len(components)} section(s)")
    return components
