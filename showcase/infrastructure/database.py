"""PostgreSQL-backed storage for the cached repository snapshot."""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import psycopg2
from psycopg2.extras import Json
from psycopg2.pool import ThreadedConnectionPool

from showcase.domain.errors import StorageError
from showcase.domain.repository import CacheEntry

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS repo_cache (
        cache_key VARCHAR(255) PRIMARY KEY,
        fetched_at BIGINT NOT NULL,
        data JSONB NOT NULL,
        written_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
    );
"""


class PostgresCacheStore:
    """Cache store keeping one snapshot row per tracked user in PostgreSQL.

    The pool is opened lazily on first use, so the store can be built
    without a reachable database and still degrade to "no cache".
    """

    def __init__(self, connection_string: str, cache_key: str, max_connections: int = 2):
        """
        Initialize database cache store.

        Args:
            connection_string: PostgreSQL connection string
            cache_key: Key of the single row this store reads and writes
            max_connections: Pool size; one foreground and one background writer
        """
        self.connection_string = connection_string
        self.cache_key = cache_key
        self.max_connections = max_connections
        self.pool: Optional[ThreadedConnectionPool] = None
        self._pool_lock = threading.Lock()

    def connect(self) -> ThreadedConnectionPool:
        """Open the connection pool if it is not open yet."""
        with self._pool_lock:
            if self.pool is None:
                self.pool = ThreadedConnectionPool(1, self.max_connections, self.connection_string)
                logger.info(f"Opened cache database pool for {self.cache_key}")
            return self.pool

    def close(self):
        with self._pool_lock:
            if self.pool is not None:
                self.pool.closeall()
                self.pool = None
                logger.info("Cache database pool closed")

    @contextmanager
    def _transaction(self) -> Iterator[Any]:
        """Yield a cursor inside one transaction on a pooled connection.

        Commits on success; rolls back and re-raises ``psycopg2.Error``.
        """
        pool = self.connect()
        conn = pool.getconn()
        try:
            with conn.cursor() as cur:
                yield cur
            conn.commit()
        except psycopg2.Error:
            conn.rollback()
            raise
        finally:
            pool.putconn(conn)

    def initialize_schema(self):
        """Create the cache table if it doesn't exist."""
        with self._transaction() as cur:
            cur.execute(SCHEMA)
        logger.info("Cache schema initialized")

    def read(self) -> Optional[CacheEntry]:
        """Return the stored snapshot, or None if it is absent or unreadable."""
        try:
            with self._transaction() as cur:
                cur.execute(
                    "SELECT fetched_at, data FROM repo_cache WHERE cache_key = %s",
                    (self.cache_key,),
                )
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.warning(f"Cache row {self.cache_key} unavailable: {e}")
            return None

        if row is None:
            return None

        fetched_at, data = row
        try:
            return CacheEntry.from_payload({"fetchedAt": fetched_at, "data": data})
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring corrupted cache row {self.cache_key}: {e}")
            return None

    def write(self, entry: CacheEntry) -> None:
        """
        Replace the stored snapshot wholesale.

        Raises:
            StorageError: If the row cannot be written
        """
        payload = entry.to_payload()
        try:
            with self._transaction() as cur:
                cur.execute(
                    """
                    INSERT INTO repo_cache (cache_key, fetched_at, data)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (cache_key)
                    DO UPDATE SET
                        fetched_at = EXCLUDED.fetched_at,
                        data = EXCLUDED.data,
                        written_at = CURRENT_TIMESTAMP
                    """,
                    (self.cache_key, payload["fetchedAt"], Json(payload["data"])),
                )
        except psycopg2.Error as e:
            raise StorageError(f"Error writing cache row {self.cache_key}: {e}") from e

        logger.info(f"Cached {len(entry.records)} repositories under {self.cache_key}")

    def invalidate(self) -> None:
        """Delete the stored snapshot if present."""
        try:
            with self._transaction() as cur:
                cur.execute("DELETE FROM repo_cache WHERE cache_key = %s", (self.cache_key,))
        except psycopg2.Error as e:
            raise StorageError(f"Error deleting cache row {self.cache_key}: {e}") from e
