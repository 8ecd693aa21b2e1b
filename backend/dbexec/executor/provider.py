"""
Connection provider capability and the driver adapters implementing it.

The executor only sees acquire / run / release; which driver sits behind them,
and whether release means "back to the pool" or "disconnect", is decided here.
"""

import logging
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import psycopg
import pymysql
from trino.exceptions import HttpError, TrinoExternalError, TrinoUserError

from dbexec.core.pool import ConnectionPool, connect, cursor_to_dicts, execute
from dbexec.executor.envelope import Row
from dbexec.executor.errors import AcquisitionError, ExecutionError, ReleaseError
from dbexec.models import DataSource

_log = logging.getLogger(__name__)

Params = dict[str, Any] | Sequence[Any] | None

# Driver errors raised while opening a connection
_CONNECT_ERRORS: tuple[type[BaseException], ...] = (
    psycopg.Error,
    pymysql.Error,
    HttpError,
    OSError,
)
_DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    psycopg.Error,
    pymysql.Error,
    TrinoUserError,
    TrinoExternalError,
)


@runtime_checkable
class ConnectionProvider(Protocol):
    """Yields one connection, runs a statement on it, takes it back."""

    def acquire(self) -> Any:
        """Return a connection handle; raise AcquisitionError when none is available."""
        ...

    def run(self, conn: Any, statement: str, params: Params) -> Sequence[Row]:
        """Execute *statement* on *conn* and return its rows."""
        ...

    def release(self, conn: Any) -> None:
        """Give *conn* back; raise ReleaseError when that fails."""
        ...


class _DataSourceProvider:
    """Shared run() for DataSource backed providers."""

    def __init__(self, datasource: DataSource) -> None:
        self.datasource = datasource

    def run(self, conn: Any, statement: str, params: Params) -> list[dict[str, Any]]:
        pt = self.datasource.product_type
        cur = None
        try:
            cur = execute(conn, statement, params, product_type=pt)
            rows = cursor_to_dicts(cur)
            conn.commit()
            return rows
        except _DRIVER_ERRORS as e:
            _log.error("%s error: %s. SQL: %s", pt.value, e, statement, exc_info=True)
            try:
                conn.rollback()
            except Exception:
                _log.debug("Rollback after failed statement also failed", exc_info=True)
            raise ExecutionError(str(e)) from e
        finally:
            if cur is not None:
                try:
                    cur.close()
                except Exception:
                    pass

    def _open(self, opener: Any) -> Any:
        try:
            return opener()
        except AcquisitionError:
            raise
        except _CONNECT_ERRORS as e:
            _log.error(
                "Connection to datasource %s failed: %s", self.datasource.name, e, exc_info=True
            )
            raise AcquisitionError(str(e)) from e


class PooledProvider(_DataSourceProvider):
    """Checks connections out of a ConnectionPool; release checks them back in."""

    def __init__(self, pool: ConnectionPool) -> None:
        super().__init__(pool.datasource)
        self.pool = pool

    def acquire(self) -> Any:
        return self._open(self.pool.checkout)

    def release(self, conn: Any) -> None:
        try:
            self.pool.checkin(conn)
        except Exception as e:
            raise ReleaseError(f"checkin failed: {e}") from e


class DirectProvider(_DataSourceProvider):
    """Opens a connection per attempt; release disconnects it."""

    def acquire(self) -> Any:
        return self._open(lambda: connect(self.datasource))

    def release(self, conn: Any) -> None:
        try:
            conn.close()
        except Exception as e:
            raise ReleaseError(f"close failed: {e}") from e


def provider_for(datasource: DataSource, pool: ConnectionPool | None = None) -> ConnectionProvider:
    """
    Pick the adapter for *datasource*: DirectProvider when it asks to close the
    connection after each execute, else PooledProvider over *pool* (or a new one).
    """
    if datasource.close_connection_after_execute:
        return DirectProvider(datasource)
    return PooledProvider(pool if pool is not None else ConnectionPool(datasource))
