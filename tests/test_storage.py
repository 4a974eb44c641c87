"""
Tests for the key-value store strategies.
Every test in TestKeyValueStore runs against both backends.
"""

import pytest

from shortener_app.exceptions import KeyNotFoundError, StoreClosedError, StoreError
from shortener_app.storage.strategies import InMemoryKeyValueStore, _prefix_upper_bound


class TestKeyValueStore:
    """Transactional get/set/delete/scan semantics"""

    def test_get_missing_key(self, store):
        """Reading an absent key raises KeyNotFoundError"""
        with store.view() as txn:
            with pytest.raises(KeyNotFoundError):
                txn.get(b"link:missing")

    def test_set_then_get(self, store):
        """A committed write is visible to later transactions"""
        with store.update() as txn:
            txn.set(b"link:abc", b"value")

        with store.view() as txn:
            assert txn.get(b"link:abc") == b"value"
            assert txn.exists(b"link:abc")

    def test_set_overwrites(self, store):
        """set() replaces an existing value"""
        with store.update() as txn:
            txn.set(b"user:a@example.com", b"old")
        with store.update() as txn:
            txn.set(b"user:a@example.com", b"new")

        with store.view() as txn:
            assert txn.get(b"user:a@example.com") == b"new"

    def test_delete(self, store):
        """Deleted keys disappear; deleting an absent key is a no-op"""
        with store.update() as txn:
            txn.set(b"link:abc", b"value")
        with store.update() as txn:
            txn.delete(b"link:abc")
            txn.delete(b"link:never-existed")

        with store.view() as txn:
            assert not txn.exists(b"link:abc")

    def test_rollback_on_error(self, store):
        """An exception inside the block discards every write"""
        with store.update() as txn:
            txn.set(b"link:keep", b"1")

        with pytest.raises(RuntimeError):
            with store.update() as txn:
                txn.set(b"link:new", b"2")
                txn.delete(b"link:keep")
                raise RuntimeError("abort")

        with store.view() as txn:
            assert not txn.exists(b"link:new")
            assert txn.get(b"link:keep") == b"1"

    def test_read_your_writes(self, store):
        """Reads inside a transaction see its own uncommitted writes"""
        with store.update() as txn:
            txn.set(b"link:a", b"1")
            assert txn.get(b"link:a") == b"1"
            txn.delete(b"link:a")
            assert not txn.exists(b"link:a")

    def test_scan_prefix_order_and_isolation(self, store):
        """Prefix scans are ordered and never leak other namespaces"""
        with store.update() as txn:
            for key in (b"link:b", b"user:a", b"link:a", b"link;", b"lin", b"link:c"):
                txn.set(key, key.upper())

        with store.view() as txn:
            result = txn.scan_prefix(b"link:")

        assert result == [
            (b"link:a", b"LINK:A"),
            (b"link:b", b"LINK:B"),
            (b"link:c", b"LINK:C"),
        ]

    def test_scan_prefix_sees_pending_changes(self, store):
        """Scans inside a write transaction include its own writes and deletes"""
        with store.update() as txn:
            txn.set(b"link:a", b"1")
            txn.set(b"link:b", b"2")

        with store.update() as txn:
            txn.delete(b"link:a")
            txn.set(b"link:c", b"3")
            keys = [key for key, _ in txn.scan_prefix(b"link:")]

        assert keys == [b"link:b", b"link:c"]

    def test_scan_empty_namespace(self, store):
        with store.view() as txn:
            assert txn.scan_prefix(b"user:") == []

    def test_read_only_transaction_rejects_writes(self, store):
        """view() transactions cannot write"""
        with store.view() as txn:
            with pytest.raises(StoreError):
                txn.set(b"link:a", b"1")
            with pytest.raises(StoreError):
                txn.delete(b"link:a")

    def test_close(self, store):
        """After close() every operation fails; closing twice is harmless"""
        store.close()
        store.close()

        with pytest.raises(StoreClosedError):
            with store.view():
                pass


class TestSQLAlchemyStore:
    """Backend-specific behavior of the SQLite store"""

    def test_data_survives_reopen(self, settings):
        """Records are durable across store instances"""
        from shortener_app.storage.factory import StoreBackend, StoreFactory

        first = StoreFactory.create(StoreBackend.SQLALCHEMY, settings)
        with first.update() as txn:
            txn.set(b"link:durable", b"yes")
        first.close()

        second = StoreFactory.create(StoreBackend.SQLALCHEMY, settings)
        try:
            with second.view() as txn:
                assert txn.get(b"link:durable") == b"yes"
        finally:
            second.close()


class TestPrefixUpperBound:
    def test_simple_prefix(self):
        assert _prefix_upper_bound(b"link:") == b"link;"

    def test_trailing_ff(self):
        assert _prefix_upper_bound(b"a\xff\xff") == b"b"

    def test_unbounded(self):
        assert _prefix_upper_bound(b"") is None
        assert _prefix_upper_bound(b"\xff") is None


def test_in_memory_store_is_empty_on_start():
    kv_store = InMemoryKeyValueStore()
    with kv_store.view() as txn:
        assert txn.scan_prefix(b"") == []
