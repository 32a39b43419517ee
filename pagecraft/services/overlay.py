"""
Pending edit overlay.

Unsaved, per-component data patches held by one editor session. An overlay
is a plain ``{component_id: {field: value}}`` mapping; every helper here
returns a new mapping so a persist-and-clear never exposes a half-cleared
overlay to a concurrent snapshot.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pagecraft.services.component_model import Component, Page

Overlay = dict[int, dict[str, Any]]


def apply(
    overlay: Mapping[int, Mapping[str, Any]],
    component_id: int,
    patch: Mapping[str, Any],
) -> Overlay:
    """
    Merge a patch into the entry for one component.

    Later patches overwrite overlapping keys; keys from earlier patches that
    the new patch does not mention survive.
    """
    result = {cid: dict(fields) for cid, fields in overlay.items()}
    result[component_id] = {**result.get(component_id, {}), **patch}
    return result


def discard(overlay: Mapping[int, Mapping[str, Any]], component_id: int) -> Overlay:
    """Drop the pending edits of one component."""
    return {cid: dict(fields) for cid, fields in overlay.items() if cid != component_id}


def without(overlay: Mapping[int, Mapping[str, Any]], component_ids: Iterable[int]) -> Overlay:
    """Drop the entries of several components (e.g. after a bulk save)."""
    dropped = set(component_ids)
    return {cid: dict(fields) for cid, fields in overlay.items() if cid not in dropped}


def clear(overlay: Mapping[int, Mapping[str, Any]] | None = None) -> Overlay:
    """Return an empty overlay."""
    return {}


def reconcile(overlay: Mapping[int, Mapping[str, Any]], page: Page) -> Overlay:
    """Drop entries whose component no longer exists on the page."""
    present = page.ids()
    return {cid: dict(fields) for cid, fields in overlay.items() if cid in present}


def merge(component: Component, overlay: Mapping[int, Mapping[str, Any]]) -> Component:
    """Return the effective component (persisted data plus pending patch)."""
    patch = overlay.get(component.id)
    if not patch:
        return component
    return component.model_copy(update={"data": {**component.data, **patch}})
