"""
Key-value store strategies using Strategy Pattern.

One flat, ordered byte-key/byte-value namespace with ACID transactions:
- SQLAlchemy: a single kv_entries table in an embedded SQLite file (default)
- In-Memory: a dict guarded by a lock, for development and tests

The repository layer only ever talks to the abstract interfaces below.
"""

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Set, Tuple

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from shortener_app.database.connection import Base, write_engine
from shortener_app.exceptions import KeyNotFoundError, StoreClosedError, StoreError
from shortener_app.models.entry import KeyValueEntry

logger = logging.getLogger(__name__)

KeyValuePair = Tuple[bytes, bytes]


class Transaction(ABC):
    """
    Operations available inside one atomic transaction.

    Reads see the transaction's own writes. Nothing is visible to other
    transactions until the enclosing transaction() block exits normally.
    """

    def __init__(self, writable: bool):
        self.writable = writable

    @abstractmethod
    def get(self, key: bytes) -> bytes:
        """
        Get the value stored under key.

        Raises:
            KeyNotFoundError: If the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Insert or overwrite key"""
        pass

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Delete key (no-op if absent)"""
        pass

    @abstractmethod
    def scan_prefix(self, prefix: bytes) -> List[KeyValuePair]:
        """
        Return every (key, value) whose key starts with prefix.

        Pairs come in lexicographic byte order of the keys. The list is
        materialized inside the transaction, so it is a point-in-time snapshot.
        """
        pass

    def exists(self, key: bytes) -> bool:
        try:
            self.get(key)
        except KeyNotFoundError:
            return False
        return True

    def _check_writable(self) -> None:
        if not self.writable:
            raise StoreError("Cannot write inside a read-only transaction")


class KeyValueStore(ABC):
    """
    Abstract base class for key-value store strategies.

    Usage:
        with store.update() as txn:
            if not txn.exists(key):
                txn.set(key, value)

    The block commits when it exits normally and rolls back when it raises.
    Write transactions are serialized against each other, so a
    check-then-insert inside one update() block is atomic.
    """

    @abstractmethod
    def transaction(self, write: bool = False):
        """
        Open a transaction (context manager yielding a Transaction).

        Args:
            write: True for a read-write transaction, False for read-only

        Raises:
            StoreClosedError: If close() was already called
            StoreError: If the backend fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release all resources. Further operations raise StoreClosedError."""
        pass

    def view(self):
        """Read-only transaction"""
        return self.transaction(write=False)

    def update(self):
        """Read-write transaction"""
        return self.transaction(write=True)


def _prefix_upper_bound(prefix: bytes) -> Optional[bytes]:
    """Smallest key greater than every key starting with prefix (None if unbounded)"""
    stripped = prefix.rstrip(b"\xff")
    if not stripped:
        return None
    return stripped[:-1] + bytes([stripped[-1] + 1])


_entries = KeyValueEntry.__table__


class SQLAlchemyTransaction(Transaction):
    """Transaction bound to one SQLAlchemy connection"""

    def __init__(self, conn: Connection, writable: bool):
        super().__init__(writable)
        self.conn = conn

    def get(self, key: bytes) -> bytes:
        row = self.conn.execute(
            select(_entries.c.value).where(_entries.c.key == key)
        ).first()
        if row is None:
            raise KeyNotFoundError(key)
        return bytes(row.value)

    def set(self, key: bytes, value: bytes) -> None:
        self._check_writable()
        result = self.conn.execute(
            update(_entries).where(_entries.c.key == key).values(value=value)
        )
        if result.rowcount == 0:
            self.conn.execute(insert(_entries).values(key=key, value=value))

    def delete(self, key: bytes) -> None:
        self._check_writable()
        self.conn.execute(delete(_entries).where(_entries.c.key == key))

    def scan_prefix(self, prefix: bytes) -> List[KeyValuePair]:
        stmt = select(_entries.c.key, _entries.c.value).where(_entries.c.key >= prefix)
        upper = _prefix_upper_bound(prefix)
        if upper is not None:
            stmt = stmt.where(_entries.c.key < upper)
        stmt = stmt.order_by(_entries.c.key)
        return [(bytes(row.key), bytes(row.value)) for row in self.conn.execute(stmt)]


class SQLAlchemyKeyValueStore(KeyValueStore):
    """
    Durable key-value store on a single SQLAlchemy table.

    Pros:
    - Durable and ACID (embedded SQLite file, no server needed)
    - Ordered keys, so prefix scans are index range scans
    - Shared safely by all request threads

    Cons:
    - One writer at a time (SQLite takes the database write lock)

    Write transactions start with BEGIN IMMEDIATE on SQLite and use
    SERIALIZABLE isolation on other databases.
    """

    def __init__(self, engine: Engine):
        """
        Initialize the store and create its table if missing.

        Args:
            engine: Engine from shortener_app.database.connection.create_store_engine
        """
        self._engine: Optional[Engine] = engine
        self._write_engine: Optional[Engine] = write_engine(engine)
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not initialize key-value table: {e}") from e

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[Transaction]:
        engine = self._write_engine if write else self._engine
        if engine is None:
            raise StoreClosedError()

        try:
            with engine.begin() as conn:
                yield SQLAlchemyTransaction(conn, writable=write)
        except SQLAlchemyError as e:
            logger.error("Key-value transaction failed: %s", e)
            raise StoreError(f"Key-value store transaction failed: {e}") from e

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._write_engine = None
        logger.info("SQLAlchemy key-value store closed")


class InMemoryTransaction(Transaction):
    """
    Buffers writes over a shared dict and applies them on commit.

    The owning store holds its lock for the whole transaction, so the
    underlying dict cannot change while this transaction is open.
    """

    def __init__(self, data: Dict[bytes, bytes], writable: bool):
        super().__init__(writable)
        self._data = data
        self._writes: Dict[bytes, bytes] = {}
        self._deleted: Set[bytes] = set()

    def get(self, key: bytes) -> bytes:
        if key in self._writes:
            return self._writes[key]
        if key in self._deleted or key not in self._data:
            raise KeyNotFoundError(key)
        return self._data[key]

    def set(self, key: bytes, value: bytes) -> None:
        self._check_writable()
        self._deleted.discard(key)
        self._writes[key] = bytes(value)

    def delete(self, key: bytes) -> None:
        self._check_writable()
        self._writes.pop(key, None)
        self._deleted.add(key)

    def scan_prefix(self, prefix: bytes) -> List[KeyValuePair]:
        merged = {
            key: value
            for key, value in self._data.items()
            if key.startswith(prefix) and key not in self._deleted
        }
        merged.update(
            (key, value) for key, value in self._writes.items() if key.startswith(prefix)
        )
        return sorted(merged.items())

    def commit(self) -> None:
        for key in self._deleted:
            self._data.pop(key, None)
        self._data.update(self._writes)


class InMemoryKeyValueStore(KeyValueStore):
    """
    In-memory key-value store using a Python dict.

    Pros:
    - Very fast, no dependencies
    - Good for development and testing

    Cons:
    - Lost on restart
    - Every transaction (reads included) holds one lock

    Transactions are fully serialized, which trivially satisfies the
    atomic check-then-insert requirement.
    """

    def __init__(self):
        self._data: Optional[Dict[bytes, bytes]] = {}
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[Transaction]:
        with self._lock:
            if self._data is None:
                raise StoreClosedError()
            txn = InMemoryTransaction(self._data, writable=write)
            yield txn
            if write:
                txn.commit()

    def close(self) -> None:
        with self._lock:
            if self._data is None:
                return
            self._data = None
        logger.info("In-memory key-value store closed")
