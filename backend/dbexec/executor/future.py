"""
Future-style executor: attempts run on a worker pool and settle a
concurrent.futures.Future exactly once.

Success resolves with the envelope; failure rejects with QueryFailedError
carrying the failure envelope. Returned futures are already running, so
cancel() has no effect.
"""

import asyncio
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any

from dbexec.core.config import settings
from dbexec.executor.attempt import AcquireFn, ReleaseFn, RunFn, bind, run_attempt
from dbexec.executor.envelope import MSG_EXCEPTION, ResultEnvelope, build_failure
from dbexec.executor.errors import QueryFailedError

_log = logging.getLogger(__name__)

_query_pool = ThreadPoolExecutor(
    max_workers=settings.QUERY_EXECUTOR_MAX_WORKERS, thread_name_prefix="query"
)


def _settle(future: "Future[ResultEnvelope]", envelope: ResultEnvelope) -> None:
    if envelope.ok:
        future.set_result(envelope)
    else:
        future.set_exception(QueryFailedError(envelope))


def _attempt_and_settle(
    future: "Future[ResultEnvelope]",
    acquire: AcquireFn,
    run: RunFn,
    release: ReleaseFn,
    statement: str,
    params: Any,
) -> None:
    try:
        envelope = run_attempt(acquire, run, release, statement, params)
    except BaseException:
        _settle(future, build_failure(MSG_EXCEPTION))
        raise
    _settle(future, envelope)


def execute_with_future(
    provider: Any,
    statement: str,
    params: Any = None,
    *,
    executor: Executor | None = None,
) -> "Future[ResultEnvelope]":
    """
    Schedule one attempt on *executor* (default: the module worker pool) and
    return its future. Setup errors never propagate: they come back as a
    future rejected with "operation exception".
    """
    future: Future[ResultEnvelope] = Future()
    future.set_running_or_notify_cancel()
    try:
        acquire, run, release = bind(provider)
        (executor or _query_pool).submit(
            _attempt_and_settle, future, acquire, run, release, statement, params
        )
    except Exception as e:
        _log.error("Could not start query attempt: %s", e, exc_info=True)
        _settle(future, build_failure(MSG_EXCEPTION))
    return future


async def execute_async(
    provider: Any,
    statement: str,
    params: Any = None,
    *,
    executor: Executor | None = None,
) -> ResultEnvelope:
    """Await execute_with_future: returns the success envelope or raises QueryFailedError."""
    return await asyncio.wrap_future(
        execute_with_future(provider, statement, params, executor=executor)
    )
