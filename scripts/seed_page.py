#!/usr/bin/env python3
"""
Page Seed Script for PageCraft
Creates tables if needed -> Creates a page -> Fills it with the default landing layout
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from pagecraft.core.config import get_settings
from pagecraft.core.database import close_db, create_engine, create_session_factory, init_db
from pagecraft.services import page_components
from pagecraft.services.component_model import PageCraftError
from pagecraft.services.component_registry import ComponentRegistry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


async def seed(page_key: str, title: str) -> bool:
    """Seed one page using the configured database."""
    settings = get_settings()
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        await init_db(engine)
        async with session_factory() as session:
            components = await page_components.seed_page(
                session, ComponentRegistry(), page_key, title
            )
            await session.commit()
        logger.info(f"Page '{page_key}' ready with {len(components)} section(s)")
        return True

    except PageCraftError as e:
        logger.error(f"Seed failed: {e.message}")
        return False
    except SQLAlchemyError as e:
        logger.error(f"Seed failed: {e}")
        return False
    finally:
        await close_db(engine)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a page with the default landing layout")
    parser.add_argument("page_key", help="URL-friendly page key, e.g. 'home'")
    parser.add_argument("--title", default="", help="Page title shown in the admin")
    args = parser.parse_args()

    success = asyncio.run(seed(args.page_key, args.title))
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
