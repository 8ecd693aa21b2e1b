"""
Query executor: acquire -> run -> release, delivered as a ResultEnvelope.

Two completion styles over one attempt routine:
- execute_with_callback(provider, statement, params, on_complete)
- execute_with_future(provider, statement, params) -> Future
  (execute_async awaits it from asyncio code)
"""

from dbexec.executor.callback import execute_with_callback
from dbexec.executor.envelope import (
    MSG_CONNECTION_FAILED,
    MSG_EXCEPTION,
    MSG_OPERATION_FAILED,
    MSG_SUCCESS,
    ResultEnvelope,
    ResultStatus,
    build_failure,
    build_success,
)
from dbexec.executor.errors import (
    AcquisitionError,
    ExecutionError,
    PoolExhaustedError,
    QueryError,
    QueryFailedError,
    ReleaseError,
    UnexpectedFault,
)
from dbexec.executor.future import execute_async, execute_with_future
from dbexec.executor.provider import (
    ConnectionProvider,
    DirectProvider,
    PooledProvider,
    provider_for,
)

__all__ = [
    "execute_with_callback",
    "execute_with_future",
    "execute_async",
    "ResultEnvelope",
    "ResultStatus",
    "build_success",
    "build_failure",
    "MSG_SUCCESS",
    "MSG_CONNECTION_FAILED",
    "MSG_OPERATION_FAILED",
    "MSG_EXCEPTION",
    "QueryError",
    "AcquisitionError",
    "PoolExhaustedError",
    "ExecutionError",
    "ReleaseError",
    "UnexpectedFault",
    "QueryFailedError",
    "ConnectionProvider",
    "PooledProvider",
    "DirectProvider",
    "provider_for",
]
