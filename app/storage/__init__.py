"""Entity storage with swappable backends."""

import logging
from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.db.session import engine_from_settings
from app.storage.base import EntityStore
from app.storage.memory import InMemoryEntityStore
from app.storage.sql import SQLAlchemyEntityStore

logger = logging.getLogger(__name__)


def create_store(config: Optional[Settings] = None) -> EntityStore:
    """Build the EntityStore selected by ``STORAGE_BACKEND``.

    The caller owns the returned store and passes it to the services.
    """
    config = config or default_settings
    backend = config.STORAGE_BACKEND.lower()
    if backend == "memory":
        logger.info("Using in-memory entity store")
        return InMemoryEntityStore()
    if backend == "sql":
        logger.info("Using SQL entity store")
        return SQLAlchemyEntityStore.from_engine(engine_from_settings(config))
    raise ValueError(f"Unknown storage backend: {config.STORAGE_BACKEND}")


__all__ = [
    "EntityStore",
    "InMemoryEntityStore",
    "SQLAlchemyEntityStore",
    "create_store",
]
