"""
Pending Edit Overlay Tests for PageCraft.
"""

from pagecraft.services import overlay
from pagecraft.services.component_model import Component, Page, effective_list


def test_apply_is_additive_per_field():
    """Test that later patches overwrite overlapping keys only."""
    result = overlay.apply({}, 1, {"title": "A", "subtitle": "S"})
    result = overlay.apply(result, 1, {"title": "B"})

    assert result == {1: {"title": "B", "subtitle": "S"}}


def test_apply_returns_new_mapping():
    """Test that apply leaves its input untouched."""
    original = {1: {"title": "A"}}

    result = overlay.apply(original, 1, {"title": "B"})

    assert original == {1: {"title": "A"}}
    assert result is not original


def test_discard_and_without():
    """Test removing one or several entries."""
    pending = {1: {"a": 1}, 2: {"b": 2}, 3: {"c": 3}}

    assert overlay.discard(pending, 2) == {1: {"a": 1}, 3: {"c": 3}}
    assert overlay.discard(pending, 99) == pending
    assert overlay.without(pending, [1, 3]) == {2: {"b": 2}}
    assert overlay.clear(pending) == {}


def test_reconcile_drops_exactly_missing_ids():
    """Test that reconcile keeps entries for existing components only."""
    page = Page.from_components(
        "home",
        [Component(id=1, type="hero"), Component(id=3, type="footer", active=False)],
    )

    result = overlay.reconcile({1: {"a": 1}, 2: {"b": 2}, 3: {"c": 3}}, page)

    assert result == {1: {"a": 1}, 3: {"c": 3}}


def test_merge_matches_effective_list():
    """Test that merging one component agrees with the effective list."""
    component = Component(id=4, type="hero", data={"title": "A", "badge": "x"}, order=1)
    pending = {4: {"title": "B"}}

    merged = overlay.merge(component, pending)

    assert merged.data == {"title": "B", "badge": "x"}
    assert effective_list(Page(key="home", components=(component,)), pending) == [merged]
    assert overlay.merge(component, {}) is component


def test_overlay_scenario():
    """Test editing, previewing and saving one field."""
    page = Page.from_components(
        "home", [Component(id=1, type="hero", data={"title": "Old"}, order=1)]
    )

    pending = overlay.apply({}, 1, {"title": "New"})
    assert effective_list(page, pending)[0].data["title"] == "New"
    assert page.require(1).data["title"] == "Old"

    pending = overlay.without(pending, [1])
    assert effective_list(page, pending)[0].data["title"] == "Old"
