"""
Page Component Service Tests for PageCraft.

Tests for:
- Page creation, lookup and deletion
- Component CRUD and duplication
- Bulk reorder
- Seeding a page with the landing layout
"""

import pytest

from pagecraft.models.page_component import ComponentStatus
from pagecraft.services import page_components
from pagecraft.services.component_model import ComponentNotFoundError
from pagecraft.services.page_components import (
    InvalidComponentError,
    PageExistsError,
    PageNotFoundError,
)


async def seed_home(session_factory, registry) -> list[int]:
    """Create page 'home' with a hero and a footer; return their ids."""
    async with session_factory() as session:
        await page_components.create_page(session, "home", "Home")
        hero = await page_components.create_component(session, registry, "home", "hero")
        footer = await page_components.create_component(session, registry, "home", "footer")
        await session.commit()
        return [hero.id, footer.id]


class TestPages:
    """Tests for page operations."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, session_factory):
        """Test creating pages and listing them by key."""
        async with session_factory() as session:
            await page_components.create_page(session, "pricing", "Pricing")
            await page_components.create_page(session, "home")
            await session.commit()

            pages = await page_components.list_pages(session)

        assert [p.key for p in pages] == ["home", "pricing"]
        assert pages[1].title == "Pricing"

    @pytest.mark.asyncio
    async def test_duplicate_key(self, session_factory):
        """Test that page keys are unique."""
        async with session_factory() as session:
            await page_components.create_page(session, "home")

            with pytest.raises(PageExistsError) as exc_info:
                await page_components.create_page(session, "home")

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_missing_page(self, session_factory):
        """Test that unknown page keys raise a 404 error."""
        async with session_factory() as session:
            with pytest.raises(PageNotFoundError):
                await page_components.get_page(session, "nope")

    @pytest.mark.asyncio
    async def test_delete_page_removes_components(self, session_factory, registry):
        """Test that deleting a page deletes its components."""
        await seed_home(session_factory, registry)

        async with session_factory() as session:
            removed = await page_components.delete_page(session, "home")
            await session.commit()

            assert removed == 2
            assert await page_components.list_components(session, "home") == []
            assert await page_components.list_pages(session) == []


class TestComponents:
    """Tests for component CRUD."""

    @pytest.mark.asyncio
    async def test_create_defaults(self, session_factory, registry):
        """Test that data, name and order default from the section and page."""
        hero_id, footer_id = await seed_home(session_factory, registry)

        async with session_factory() as session:
            hero = await page_components.get_component(session, hero_id)
            footer = await page_components.get_component(session, footer_id)

        assert hero.component_name == "Hero Banner"
        assert hero.component_data == registry.get("hero").default_data
        assert (hero.component_order, footer.component_order) == (1, 2)
        assert hero.status == ComponentStatus.ACTIVE.value

    @pytest.mark.asyncio
    async def test_create_unknown_type(self, session_factory, registry):
        """Test that types without a section are rejected."""
        await seed_home(session_factory, registry)

        async with session_factory() as session:
            with pytest.raises(InvalidComponentError) as exc_info:
                await page_components.create_component(session, registry, "home", "missing-type")

        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_create_on_missing_page(self, session_factory, registry):
        """Test that components need an existing page."""
        async with session_factory() as session:
            with pytest.raises(PageNotFoundError):
                await page_components.create_component(session, registry, "ghost", "hero")

    @pytest.mark.asyncio
    async def test_update_partial(self, session_factory, registry):
        """Test that only the given fields change and data is replaced."""
        hero_id, _ = await seed_home(session_factory, registry)

        async with session_factory() as session:
            updated = await page_components.update_component(
                session, hero_id, component_data={"title": "Only"}, is_active=False, component_name=None
            )
            await session.commit()

        assert updated.component_data == {"title": "Only"}
        assert updated.is_active is False
        assert updated.component_name == "Hero Banner"

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, session_factory, registry):
        """Test that identity fields cannot be updated."""
        hero_id, _ = await seed_home(session_factory, registry)

        async with session_factory() as session:
            with pytest.raises(InvalidComponentError):
                await page_components.update_component(session, hero_id, page_key="other")

    @pytest.mark.asyncio
    async def test_update_missing(self, session_factory):
        """Test that updating a missing component raises a 404 error."""
        async with session_factory() as session:
            with pytest.raises(ComponentNotFoundError):
                await page_components.update_component(session, 404, is_active=True)

    @pytest.mark.asyncio
    async def test_duplicate(self, session_factory, registry):
        """Test that duplicates are inactive drafts at the end of the page."""
        hero_id, _ = await seed_home(session_factory, registry)

        async with session_factory() as session:
            copy = await page_components.duplicate_component(session, hero_id)
            await session.commit()

        assert copy.id != hero_id
        assert copy.component_name == "Hero Banner (copy)"
        assert copy.component_order == 3
        assert copy.is_active is False
        assert copy.status == ComponentStatus.DRAFT.value

    @pytest.mark.asyncio
    async def test_delete_and_active_listing(self, session_factory, registry):
        """Test deletion and the active-only listing."""
        hero_id, footer_id = await seed_home(session_factory, registry)

        async with session_factory() as session:
            await page_components.update_component(session, footer_id, is_active=False)
            assert await page_components.delete_component(session, hero_id) == hero_id
            await session.commit()

            everything = await page_components.list_components(session, "home")
            active = await page_components.list_components(session, "home", active_only=True)

        assert [c.id for c in everything] == [footer_id]
        assert active == []

    @pytest.mark.asyncio
    async def test_load_page(self, session_factory, registry):
        """Test loading the in-memory page used by the editor."""
        hero_id, footer_id = await seed_home(session_factory, registry)

        async with session_factory() as session:
            page = await page_components.load_page(session, "home")

        assert page.key == "home"
        assert [c.id for c in page.components] == [hero_id, footer_id]
        assert page.require(hero_id).type == "hero"


class TestReorder:
    """Tests for bulk reorder."""

    @pytest.mark.asyncio
    async def test_reorder(self, session_factory, registry):
        """Test applying several orders at once."""
        hero_id, footer_id = await seed_home(session_factory, registry)

        async with session_factory() as session:
            updated = await page_components.reorder_components(
                session, [(hero_id, 2), (footer_id, 1)]
            )
            await session.commit()
            ordered = await page_components.list_components(session, "home")

        assert updated == 2
        assert [c.id for c in ordered] == [footer_id, hero_id]

    @pytest.mark.asyncio
    async def test_reorder_missing_id_changes_nothing(self, session_factory, registry):
        """Test that one unknown id rejects the whole reorder."""
        hero_id, footer_id = await seed_home(session_factory, registry)

        async with session_factory() as session:
            with pytest.raises(ComponentNotFoundError):
                await page_components.reorder_components(session, [(hero_id, 9), (999, 1)])
            await session.rollback()

        async with session_factory() as session:
            ordered = await page_components.list_components(session, "home")

        assert [c.component_order for c in ordered] == [1, 2]

    @pytest.mark.asyncio
    async def test_reorder_empty(self, session_factory):
        """Test that an empty reorder is a no-op."""
        async with session_factory() as session:
            assert await page_components.reorder_components(session, []) == 0


class TestSeed:
    """Tests for seeding a page with the landing layout."""

    @pytest.mark.asyncio
    async def test_seed_default_layout(self, session_factory, registry):
        """Test that seeding creates every section in layout order."""
        async with session_factory() as session:
            created = await page_components.seed_page(session, registry, "landing", "Landing")
            await session.commit()

            rows = await page_components.list_components(session, "landing", active_only=True)

        assert len(created) == len(page_components.DEFAULT_LAYOUT)
        assert [row.component_type for row in rows] == [t.value for t in page_components.DEFAULT_LAYOUT]
        assert [row.component_order for row in rows] == list(range(1, len(rows) + 1))

    @pytest.mark.asyncio
    async def test_seed_existing_page(self, session_factory, registry):
        """Test that seeding never touches an existing page."""
        async with session_factory() as session:
            await page_components.create_page(session, "landing")

            with pytest.raises(PageExistsError):
                await page_components.seed_page(session, registry, "landing", layout=["hero"])
