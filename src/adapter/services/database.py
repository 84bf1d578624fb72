"""Engine setup shared by the API and the workers

PostgreSQL serializes balance mutations with SELECT FOR UPDATE. SQLite
ignores FOR UPDATE and pysqlite only opens a transaction at the first
write, so two sessions could both read a balance before either writes it.
On SQLite every transaction is therefore started with BEGIN IMMEDIATE,
which takes the database write lock up front; a second writer waits
(up to the driver's busy timeout) until the first commits or rolls back.
"""

import logging
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def serialize_sqlite_writers(engine: AsyncEngine) -> AsyncEngine:
    """Install BEGIN IMMEDIATE transaction handling when engine is SQLite"""
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        # pysqlite's own deferred BEGIN is replaced by the one below
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    logger.debug("SQLite engine will start transactions with BEGIN IMMEDIATE")
    return engine
