"""Engine, session factory and the request-scoped session dependency"""

import logging
import time

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import (
    DATABASE_URL,
    DB_LOG_SLOW_QUERIES,
    DB_MAX_OVERFLOW,
    DB_POOL_RECYCLE,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
    DB_SLOW_QUERY_THRESHOLD,
    DB_SQLITE_BUSY_TIMEOUT,
)

logger = logging.getLogger(__name__)

DIALECT = make_url(DATABASE_URL).get_backend_name()


def engine_options(dialect: str) -> dict:
    """
    create_engine() keyword arguments for a dialect.

    SQLite connections are shared between request threads and event
    listeners, and concurrent bookings queue on the file lock for up to
    DB_SQLITE_BUSY_TIMEOUT seconds. Server databases get a pre-pinged,
    recycled connection pool.
    """
    if dialect == "sqlite":
        return {"connect_args": {"check_same_thread": False, "timeout": DB_SQLITE_BUSY_TIMEOUT}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": DB_POOL_RECYCLE,
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
        "pool_timeout": DB_POOL_TIMEOUT,
    }


try:
    engine = create_engine(DATABASE_URL, echo=False, **engine_options(DIALECT))
    logger.info(f"✅ Database engine created ({DIALECT})")
except Exception as e:
    logger.error(f"❌ Failed to create database engine: {e}")
    raise


def _track_statement_start(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


def _log_slow_statement(conn, cursor, statement, parameters, context, executemany):
    elapsed = time.perf_counter() - conn.info["query_start_time"].pop()
    if elapsed > DB_SLOW_QUERY_THRESHOLD:
        # Overlap checks and appointment listings are the usual suspects
        logger.warning(f"🐌 Slow {DIALECT} query ({elapsed:.2f}s): {' '.join(statement.split())[:200]}")


if DB_LOG_SLOW_QUERIES:
    event.listen(engine, "before_cursor_execute", _track_statement_start)
    event.listen(engine, "after_cursor_execute", _log_slow_statement)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
