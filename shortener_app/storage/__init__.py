"""
Key-value store module.

Implements the Strategy Pattern for the embedded, ordered, transactional
store that holds every link and user record.
"""

from .strategies import (
    KeyValueStore,
    Transaction,
    SQLAlchemyKeyValueStore,
    InMemoryKeyValueStore,
)
from .factory import StoreFactory, StoreBackend

__all__ = [
    "KeyValueStore",
    "Transaction",
    "SQLAlchemyKeyValueStore",
    "InMemoryKeyValueStore",
    "StoreFactory",
    "StoreBackend",
]
