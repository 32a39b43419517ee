"""
PageCraft - Application Context
Shared services created at startup and stored on ``app.state.context``
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.requests import HTTPConnection

from pagecraft.core.config import Settings
from pagecraft.core.database import close_db, create_engine, create_session_factory, init_db
from pagecraft.services.component_registry import ComponentRegistry
from pagecraft.services.page_fetcher import PageFetcher
from pagecraft.services.preview_hub import PreviewHub
from pagecraft.services.preview_renderer import PreviewRenderer

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request or socket handler needs, passed explicitly."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    registry: ComponentRegistry
    renderer: PreviewRenderer
    fetcher: PageFetcher
    hub: PreviewHub

    @classmethod
    def create(cls, settings: Settings) -> "AppContext":
        engine = create_engine(settings)
        registry = ComponentRegistry()
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            registry=registry,
            renderer=PreviewRenderer(registry),
            fetcher=PageFetcher(settings.page_api_base_url, timeout=settings.page_api_timeout),
            hub=PreviewHub(),
        )

    async def startup(self) -> None:
        await init_db(self.engine)
        logger.info("Database initialized")

    async def shutdown(self) -> None:
        await self.fetcher.aclose()
        await close_db(self.engine)
        logger.info("Database connections closed")


def get_context(connection: HTTPConnection) -> AppContext:
    """Return the context of the app serving a request or websocket."""
    return connection.app.state.context
