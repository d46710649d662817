"""
Shared journals database connection
"""
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session

from .utils.settings import (
    SHAREDJOURNAL_DB_URI,
    SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS,
    SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS,
    SHAREDJOURNAL_DB_POOL_SIZE,
    SHAREDJOURNAL_DB_MAX_OVERFLOW,
)


def configure_sqlite_engine(engine: Engine) -> Engine:
    """
    pysqlite defers BEGIN until the first DML statement, which breaks SAVEPOINT. Let
    SQLAlchemy emit BEGIN itself and turn on foreign key enforcement.
    https://docs.sqlalchemy.org/en/20/dialects/sqlite.html#serializable-isolation-savepoints-transactional-ddl
    """

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def create_sharedjournal_engine(
    url: Optional[str],
    pool_size: int,
    max_overflow: int,
    statement_timeout: int,
    pool_recycle: int = SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS,
    **kwargs: Any,
) -> Engine:
    db_url = make_url(url)
    if db_url.get_backend_name() == "sqlite":
        engine = create_engine(url, **kwargs)
        return configure_sqlite_engine(engine)

    connect_args: Dict[str, Any] = {}
    if db_url.get_backend_name() == "postgresql":
        # Statement timeout: https://stackoverflow.com/a/44936982
        connect_args["options"] = f"-c statement_timeout={statement_timeout}"

    # Pooling: https://docs.sqlalchemy.org/en/20/core/pooling.html#sqlalchemy.pool.QueuePool
    return create_engine(
        url,
        pool_size=pool_size,
        pool_recycle=pool_recycle,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        connect_args=connect_args,
        **kwargs,
    )


engine = create_sharedjournal_engine(
    url=SHAREDJOURNAL_DB_URI,
    pool_size=SHAREDJOURNAL_DB_POOL_SIZE,
    max_overflow=SHAREDJOURNAL_DB_MAX_OVERFLOW,
    statement_timeout=SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS,
    pool_recycle=SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS,
)
SessionLocal = sessionmaker(bind=engine)


def yield_connection_from_env() -> Iterator[Session]:
    """
    Yields a database connection (created using environment variables). As per FastAPI docs:
    https://fastapi.tiangolo.com/tutorial/sql-databases/#create-a-dependency
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def dispose_engine() -> None:
    engine.dispose()


yield_connection_from_env_ctx = contextmanager(yield_connection_from_env)
