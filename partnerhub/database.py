"""Pooled psycopg2 connections for the Postgres key-value backend."""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from psycopg2.extensions import connection as PgConnection
from psycopg2.pool import SimpleConnectionPool

from partnerhub import settings

logger = logging.getLogger(__name__)

_pool: Optional[SimpleConnectionPool] = None


def _open_pool() -> SimpleConnectionPool:
    global _pool
    if _pool is not None:
        return _pool
    if not settings.POSTGRES_DSN:
        raise RuntimeError("POSTGRES_DSN is not configured")
    _pool = SimpleConnectionPool(
        1,
        settings.DB_MAX_CONN,
        dsn=settings.POSTGRES_DSN,
        connect_timeout=settings.PG_CONNECT_TIMEOUT_S,
    )
    logger.info("postgres pool opened max_conn=%d", settings.DB_MAX_CONN)
    return _pool


def close_pool() -> None:
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("postgres pool closed")


@contextmanager
def get_conn() -> Iterator[PgConnection]:
    """Borrow a connection; the transaction commits on a clean exit and rolls back on error.

        with get_conn() as conn, conn.cursor() as cur:
            cur.execute(...)
    """
    pool = _open_pool()
    conn = pool.getconn()
    try:
        yield conn
    except Exception:
        if not conn.closed:
            conn.rollback()
        raise
    else:
        if not conn.closed:
            conn.commit()
    finally:
        pool.putconn(conn)
