"""
Failure taxonomy for one execution attempt.

Only QueryFailedError reaches callers (as a future rejection); the others are
raised by providers and mapped to failure envelopes by the attempt routine.
"""

from typing import Any

from dbexec.executor.envelope import ResultEnvelope


class QueryError(Exception):
    """Base for all pydbexec errors."""


class AcquisitionError(QueryError):
    """The provider could not hand back a usable connection."""


class PoolExhaustedError(AcquisitionError):
    pass


class ExecutionError(QueryError):
    """The statement ran but the driver reported an error."""


class ReleaseError(QueryError):
    """Returning or closing the connection failed after the outcome was decided."""


class UnexpectedFault(QueryError):
    """Any other error raised during the attempt."""


class QueryFailedError(QueryError):
    """Rejection value of execute_with_future; carries the failure envelope."""

    def __init__(self, envelope: ResultEnvelope) -> None:
        super().__init__(envelope.message)
        self.envelope = envelope

    @property
    def payload(self) -> dict[str, Any]:
        return self.envelope.to_wire()
