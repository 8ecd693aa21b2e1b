"""
pydbexec: uniform query execution over pooled database connections.

Exports the executor entry points and the result envelope.
"""

from dbexec.executor import (
    ResultEnvelope,
    ResultStatus,
    execute_async,
    execute_with_callback,
    execute_with_future,
)

__all__ = [
    "ResultEnvelope",
    "ResultStatus",
    "execute_with_callback",
    "execute_with_future",
    "execute_async",
]
