"""
Callback-style executor: the envelope is handed to on_complete exactly once.
"""

import logging
from collections.abc import Callable
from typing import Any

from dbexec.executor.attempt import bind, run_attempt
from dbexec.executor.envelope import MSG_EXCEPTION, ResultEnvelope, build_failure

_log = logging.getLogger(__name__)


def execute_with_callback(
    provider: Any,
    statement: str,
    params: Any,
    on_complete: Callable[[ResultEnvelope], Any],
) -> None:
    """
    Run *statement* through *provider* in the calling thread, then call
    on_complete(envelope). The connection is released before on_complete runs.

    An exception raised by on_complete is logged and propagated; on_complete
    is not called again.
    """
    try:
        acquire, run, release = bind(provider)
    except Exception as e:
        _log.error("Cannot execute: %s", e, exc_info=True)
        envelope = build_failure(MSG_EXCEPTION)
    else:
        envelope = run_attempt(acquire, run, release, statement, params)

    try:
        on_complete(envelope)
    except Exception:
        _log.exception("on_complete raised while handling %s envelope", envelope.status.name)
        raise
