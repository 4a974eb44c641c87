"""
Factory for creating key-value store instances.
"""

import logging
from enum import Enum

from .strategies import KeyValueStore, SQLAlchemyKeyValueStore, InMemoryKeyValueStore
from shortener_app.config import Settings
from shortener_app.database.connection import create_store_engine

logger = logging.getLogger(__name__)


class StoreBackend(Enum):
    """Available key-value store backends"""
    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"


class StoreFactory:
    """
    Simple factory for creating key-value store instances.

    Unlike the cache factory there is no singleton here: the application
    lifespan creates exactly one store and owns its close().
    """

    @staticmethod
    def create(backend: StoreBackend, settings: Settings) -> KeyValueStore:
        """
        Create a store for the given backend.

        Args:
            backend: Type of store backend (from enum)
            settings: Application settings (database URL, busy timeout)

        Returns:
            A ready-to-use KeyValueStore
        """
        if backend == StoreBackend.SQLALCHEMY:
            engine = create_store_engine(
                settings.database_url,
                busy_timeout=settings.sqlite_busy_timeout,
                echo=settings.debug,
            )
            store = SQLAlchemyKeyValueStore(engine)
            logger.info("SQLAlchemy key-value store initialized")

        elif backend == StoreBackend.MEMORY:
            store = InMemoryKeyValueStore()
            logger.info("In-memory key-value store initialized")

        else:
            raise ValueError(f"Unknown store backend: {backend}")

        return store
