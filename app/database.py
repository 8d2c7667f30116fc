"""Postgres connection pool for the question service."""
import logging
from contextlib import contextmanager
from typing import Optional

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

from app.config import get_settings

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.ThreadedConnectionPool] = None


def initialize_connection_pool() -> None:
    """Open the pool with the configured size. Called once at startup."""
    global _connection_pool

    settings = get_settings()
    _connection_pool = pool.ThreadedConnectionPool(
        settings.db_pool_min,
        settings.db_pool_max,
        cursor_factory=RealDictCursor,
        **settings.db_config
    )
    logger.info(f"Database pool ready (min={settings.db_pool_min}, max={settings.db_pool_max})")


def close_connection_pool() -> None:
    global _connection_pool

    if _connection_pool is not None:
        _connection_pool.closeall()
        _connection_pool = None
        logger.info("Database pool closed")


@contextmanager
def get_db_connection():
    """Borrow a pooled connection for one unit of work.

    Callers commit explicitly. A psycopg2 error rolls the open transaction
    back before propagating, and the connection always goes back to the pool.
    """
    if _connection_pool is None:
        raise RuntimeError("Database pool is not initialized")

    conn = _connection_pool.getconn()
    try:
        yield conn
    except psycopg2.Error as e:
        logger.error(f"Database error: {e}")
        conn.rollback()
        raise
    finally:
        _connection_pool.putconn(conn)
