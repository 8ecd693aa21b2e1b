"""
Idle-connection pool for one external DataSource.

Reuses connections to avoid open/close on every attempt. Includes max-age
eviction and a ping on checkout for connections that sat idle for a while.
The pool is created by the caller and handed to PooledProvider; there is no
process-wide instance.
"""

import logging
import threading
import time
from typing import Any, NamedTuple

from dbexec.core.config import settings
from dbexec.models import DataSource

from .connect import connect

_log = logging.getLogger(__name__)

_PING_IDLE_THRESHOLD = 30.0  # only ping connections idle longer than this (seconds)


class _PoolEntry(NamedTuple):
    conn: Any
    created_at: float  # time.monotonic() when the connection was opened
    last_used: float  # time.monotonic() when last checked in


class ConnectionPool:
    """LIFO idle pool with max-age eviction; opens a new connection when empty."""

    def __init__(
        self,
        datasource: DataSource,
        *,
        size: int | None = None,
        max_age: float | None = None,
    ) -> None:
        self.datasource = datasource
        self._idle: list[_PoolEntry] = []
        self._opened_at: dict[int, float] = {}
        self._lock = threading.Lock()
        self._size = settings.EXTERNAL_DB_POOL_SIZE if size is None else size
        self._max_age = (
            settings.EXTERNAL_DB_POOL_MAX_AGE_SEC if max_age is None else max_age
        )

    def checkout(self) -> Any:
        """Return a usable connection (idle one if healthy, else freshly opened)."""
        while True:
            entry = self._pop()
            if entry is None:
                break
            now = time.monotonic()
            if now - entry.created_at > self._max_age:
                self._discard(entry.conn)
                continue
            if now - entry.last_used > _PING_IDLE_THRESHOLD and not self._is_alive(
                entry.conn
            ):
                self._discard(entry.conn)
                continue
            return entry.conn

        conn = connect(self.datasource)
        with self._lock:
            self._opened_at[id(conn)] = time.monotonic()
        _log.debug("Opened connection for datasource %s", self.datasource.name)
        return conn

    def checkin(self, conn: Any) -> None:
        """
        Take a connection back: rollback, then keep it idle or close it if the
        pool is full. Raises if the connection cannot be closed.
        """
        try:
            conn.rollback()
        except Exception:
            _log.debug("Rollback failed on checkin; closing connection", exc_info=True)
            self._discard(conn, quiet=False)
            return

        with self._lock:
            if len(self._idle) < self._size:
                created_at = self._opened_at.get(id(conn), time.monotonic())
                self._idle.append(
                    _PoolEntry(conn=conn, created_at=created_at, last_used=time.monotonic())
                )
                return

        self._discard(conn, quiet=False)

    def dispose(self) -> None:
        """Close all idle connections."""
        with self._lock:
            entries, self._idle = self._idle, []
        for e in entries:
            self._discard(e.conn)

    def stats(self) -> dict[str, int]:
        """Return pool statistics for monitoring."""
        with self._lock:
            return {"idle_connections": len(self._idle), "size": self._size}

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _pop(self) -> _PoolEntry | None:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return None

    def _discard(self, conn: Any, *, quiet: bool = True) -> None:
        with self._lock:
            self._opened_at.pop(id(conn), None)
        try:
            conn.close()
        except Exception:
            if not quiet:
                raise
            _log.debug("Ignoring close failure on evicted connection", exc_info=True)

    @staticmethod
    def _is_alive(conn: Any) -> bool:
        """Lightweight ping: attempt a no-op query to detect broken connections."""
        try:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            cur.close()
            return True
        except Exception:
            return False
