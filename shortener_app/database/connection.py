"""
SQLAlchemy engine setup for the key-value store.

SQLite is the default embedded backend. pysqlite's own transaction handling
is switched off so every transaction starts with an explicit BEGIN, and
write transactions can ask for BEGIN IMMEDIATE to take the database write
lock up front.
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()

# Execution option read by the "begin" listener: DEFERRED or IMMEDIATE
SQLITE_BEGIN_OPTION = "sqlite_begin"


def create_store_engine(database_url: str, busy_timeout: float = 30.0, echo: bool = False) -> Engine:
    """
    Create the engine backing the key-value store.

    Args:
        database_url: SQLAlchemy URL, e.g. sqlite:///./shortener.db
        busy_timeout: Seconds SQLite waits on a locked database before failing
        echo: Log emitted SQL

    Returns:
        A configured Engine
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Connections are shared across request threads through the pool
        connect_args = {"check_same_thread": False, "timeout": busy_timeout}

    engine = create_engine(database_url, connect_args=connect_args, echo=echo)

    if engine.dialect.name == "sqlite":
        _install_sqlite_transaction_hooks(engine)

    logger.info("Store engine created for dialect %s", engine.dialect.name)
    return engine


def write_engine(engine: Engine) -> Engine:
    """Return a view of the engine whose transactions serialize writers"""
    if engine.dialect.name == "sqlite":
        return engine.execution_options(**{SQLITE_BEGIN_OPTION: "IMMEDIATE"})
    return engine.execution_options(isolation_level="SERIALIZABLE")


def _install_sqlite_transaction_hooks(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _configure_sqlite_connection(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        # WAL: readers keep a snapshot while a writer holds the lock
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        mode = conn.get_execution_options().get(SQLITE_BEGIN_OPTION, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")
