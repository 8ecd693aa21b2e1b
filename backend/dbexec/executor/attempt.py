"""
One execution attempt: acquire -> run -> release -> envelope.

Both completion styles (callback and future) call run_attempt and differ only
in how they hand the envelope over. run_attempt never raises for an
Exception; every outcome becomes an envelope.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from dbexec.executor.envelope import (
    MSG_CONNECTION_FAILED,
    MSG_EXCEPTION,
    MSG_OPERATION_FAILED,
    ResultEnvelope,
    Row,
    build_failure,
    build_success,
)
from dbexec.executor.errors import AcquisitionError, UnexpectedFault

_log = logging.getLogger(__name__)

AcquireFn = Callable[[], Any]
RunFn = Callable[[Any, str, Any], Sequence[Row]]
ReleaseFn = Callable[[Any], None]

# Raised by acquire: reported as "connection failed"; anything else is unexpected
_ACQUISITION_ERRORS = (AcquisitionError, ConnectionError, TimeoutError)


def bind(provider: Any) -> tuple[AcquireFn, RunFn, ReleaseFn]:
    """Resolve acquire/run/release on *provider*; UnexpectedFault if any is missing."""
    try:
        fns = (provider.acquire, provider.run, provider.release)
    except AttributeError as e:
        raise UnexpectedFault(f"not a connection provider: {e}") from e
    if not all(callable(f) for f in fns):
        raise UnexpectedFault(f"not a connection provider: {type(provider).__name__}")
    return fns


def execution_failure_message(err: BaseException) -> str:
    detail = str(err).strip()
    return f"{MSG_OPERATION_FAILED}: {detail}" if detail else MSG_OPERATION_FAILED


def run_attempt(
    acquire: AcquireFn,
    run: RunFn,
    release: ReleaseFn,
    statement: str,
    params: Any = None,
) -> ResultEnvelope:
    try:
        conn = acquire()
    except _ACQUISITION_ERRORS as e:
        _log.error("Connection acquisition failed: %s", e, exc_info=True)
        return build_failure(MSG_CONNECTION_FAILED)
    except Exception as e:
        _log.error("Unexpected error while acquiring connection: %s", e, exc_info=True)
        return build_failure(MSG_EXCEPTION)
    if conn is None:
        _log.error("Provider returned no connection")
        return build_failure(MSG_CONNECTION_FAILED)

    try:
        envelope = _run(run, conn, statement, params)
    finally:
        _release(release, conn)
    return envelope


def _run(run: RunFn, conn: Any, statement: str, params: Any) -> ResultEnvelope:
    try:
        rows = run(conn, statement, params)
    except Exception as e:
        _log.error("Statement failed: %s. SQL: %s", e, statement, exc_info=True)
        return build_failure(execution_failure_message(e))
    try:
        envelope = build_success(rows)
    except Exception as e:
        _log.error("Could not read rows (%s): %s", type(rows).__name__, e, exc_info=True)
        return build_failure(MSG_EXCEPTION)
    _log.debug("Statement returned %d row(s)", envelope.count)
    return envelope


def _release(release: ReleaseFn, conn: Any) -> None:
    # The outcome is already decided; a release failure is only logged.
    try:
        release(conn)
    except Exception as e:
        _log.warning("Releasing connection failed: %s", e, exc_info=True)
