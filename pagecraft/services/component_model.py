"""
Page Component Model for PageCraft.

Immutable in-memory view of a page's components and the pure operations the
editor and the preview renderer share:

- effective list (active filter, pending-edit merge, stable order sort)
- single-component reorder / visibility / upsert / remove
- optional renumbering and neighbour moves for the editor arrows

Every operation returns a new ``Page``; inputs are never mutated, so callers
can diff before/after snapshots.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from fastapi import status
from pydantic import BaseModel, ConfigDict, Field


class PageCraftError(Exception):
    """Base error for page and component operations."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ComponentNotFoundError(PageCraftError):
    """Raised when a component id is not part of the page."""

    def __init__(self, component_id: int):
        self.component_id = component_id
        super().__init__(
            f"Component {component_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class MoveDirection(str, Enum):
    """Editor arrow directions."""

    UP = "up"
    DOWN = "down"


class Component(BaseModel):
    """One content block on a page."""

    model_config = ConfigDict(frozen=True)

    id: int
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    order: int = 0
    active: bool = True

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Component":
        """
        Build a component from a persisted row.

        Args:
            row: Mapping with ``id``, ``component_type``, ``component_order``,
                ``component_data`` and ``is_active`` keys

        Raises:
            pydantic.ValidationError: If the row does not have that shape
        """
        return cls(
            id=row["id"],
            type=row["component_type"],
            data=row.get("component_data") or {},
            order=row.get("component_order", 0),
            active=row.get("is_active", True),
        )

    def to_row(self) -> dict[str, Any]:
        """Convert back to the persisted row shape."""
        return {
            "id": self.id,
            "component_type": self.type,
            "component_order": self.order,
            "component_data": dict(self.data),
            "is_active": self.active,
        }


class Page(BaseModel):
    """A page key plus its components in insertion order."""

    model_config = ConfigDict(frozen=True)

    key: str
    components: tuple[Component, ...] = ()

    @classmethod
    def from_components(cls, key: str, components: Iterable[Component]) -> "Page":
        """Build a page, rejecting duplicate component ids."""
        items = tuple(components)
        seen: set[int] = set()
        for component in items:
            if component.id in seen:
                raise PageCraftError(
                    f"Duplicate component id {component.id} on page '{key}'",
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                )
            seen.add(component.id)
        return cls(key=key, components=items)

    def ids(self) -> set[int]:
        """Ids of all components, active or not."""
        return {component.id for component in self.components}

    def get(self, component_id: int) -> Component | None:
        """Return the component with the given id, if present."""
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def require(self, component_id: int) -> Component:
        """Return the component with the given id or raise."""
        component = self.get(component_id)
        if component is None:
            raise ComponentNotFoundError(component_id)
        return component


def _replace(page: Page, component_id: int, **changes: Any) -> Page:
    page.require(component_id)
    return page.model_copy(
        update={
            "components": tuple(
                c.model_copy(update=changes) if c.id == component_id else c
                for c in page.components
            )
        }
    )


def sorted_components(page: Page) -> list[Component]:
    """All components (including inactive) in render order."""
    # sorted() is stable: equal orders keep insertion order
    return sorted(page.components, key=lambda c: c.order)


def effective_list(
    page: Page,
    overlay: Mapping[int, Mapping[str, Any]] | None = None,
) -> list[Component]:
    """
    Compute the rendered view of a page.

    Filters out inactive components, shallow-merges each component's
    pending-edit patch over its persisted data (patch keys win), and sorts
    by ``order`` ascending with ties kept in insertion order.

    Args:
        page: Canonical page snapshot
        overlay: Pending edits keyed by component id

    Returns:
        New list of effective components; inputs are left untouched
    """
    overlay = overlay or {}
    result = []
    for component in sorted_components(page):
        if not component.active:
            continue
        patch = overlay.get(component.id)
        if patch:
            component = component.model_copy(update={"data": {**component.data, **patch}})
        result.append(component)
    return result


def reorder(page: Page, component_id: int, new_order: int) -> Page:
    """Replace one component's order without renumbering its siblings."""
    return _replace(page, component_id, order=new_order)


def set_active(page: Page, component_id: int, active: bool) -> Page:
    """Show or hide one component; hidden components are kept."""
    return _replace(page, component_id, active=active)


def upsert(page: Page, component: Component) -> Page:
    """Replace the component with the same id, or append it."""
    if page.get(component.id) is None:
        return page.model_copy(update={"components": page.components + (component,)})
    return page.model_copy(
        update={
            "components": tuple(
                component if c.id == component.id else c for c in page.components
            )
        }
    )


def remove(page: Page, component_id: int) -> Page:
    """Drop a component; removing an unknown id returns the page unchanged."""
    if page.get(component_id) is None:
        return page
    return page.model_copy(
        update={"components": tuple(c for c in page.components if c.id != component_id)}
    )


def renumber(page: Page) -> Page:
    """Assign contiguous orders 1..n following the current render order."""
    new_orders = {c.id: index for index, c in enumerate(sorted_components(page), start=1)}
    return page.model_copy(
        update={
            "components": tuple(
                c.model_copy(update={"order": new_orders[c.id]}) for c in page.components
            )
        }
    )


def move(page: Page, component_id: int, direction: MoveDirection | str) -> Page:
    """
    Swap a component with its neighbour and renumber the page.

    Moving the first component up or the last one down returns the page
    unchanged.
    """
    direction = MoveDirection(direction)
    ordered = sorted_components(page)
    index = next((i for i, c in enumerate(ordered) if c.id == component_id), None)
    if index is None:
        raise ComponentNotFoundError(component_id)

    target = index - 1 if direction == MoveDirection.UP else index + 1
    if target < 0 or target >= len(ordered):
        return page

    ordered[index], ordered[target] = ordered[target], ordered[index]
    new_orders = {c.id: position for position, c in enumerate(ordered, start=1)}
    return page.model_copy(
        update={
            "components": tuple(
                c.model_copy(update={"order": new_orders[c.id]}) for c in page.components
            )
        }
    )


def order_pairs(page: Page) -> list[dict[str, int]]:
    """``{id, component_order}`` pairs for the bulk reorder endpoint."""
    return [{"id": c.id, "component_order": c.order} for c in sorted_components(page)]
