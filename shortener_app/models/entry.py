from sqlalchemy import Column, LargeBinary
from shortener_app.database.connection import Base


class KeyValueEntry(Base):
    """
    One record of the flat key-value namespace.

    Keys are raw bytes ordered lexicographically (SQLite compares BLOBs with
    memcmp), which is what prefix scans rely on. Entity types are told apart
    by key prefix only (see shortener_app.services.repository).
    """
    __tablename__ = "kv_entries"

    key = Column(LargeBinary, primary_key=True)
    value = Column(LargeBinary, nullable=False)
