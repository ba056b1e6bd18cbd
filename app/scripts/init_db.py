#!/usr/bin/env python
"""Script to create the crowdfunding tables in the configured database."""

import asyncio
import logging

from app.core.config import settings
from app.db.session import create_tables, engine_from_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_db():
    """Create all tables that do not exist yet."""
    engine = engine_from_settings(settings)
    try:
        await create_tables(engine)
        logger.info(f"Created tables on {engine.url.render_as_string(hide_password=True)}")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
