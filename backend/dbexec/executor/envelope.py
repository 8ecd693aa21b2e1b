"""
Result envelope returned by every execution attempt.

    status:  1 success, 0 failure
    data:    rows (success only)
    count:   len(data) (success only)
    message: outcome description (always)
"""

from collections.abc import Mapping, Sequence
from enum import IntEnum
from typing import Any

from pydantic import model_validator
from sqlmodel import Field, SQLModel

MSG_SUCCESS = "operation succeeded"
MSG_CONNECTION_FAILED = "connection failed"
MSG_OPERATION_FAILED = "operation failed"
MSG_EXCEPTION = "operation exception"

Row = Mapping[str, Any]


class ResultStatus(IntEnum):
    FAILURE = 0
    SUCCESS = 1


class ResultEnvelope(SQLModel):
    status: ResultStatus = ResultStatus.FAILURE
    data: list[Any] | None = None
    count: int | None = Field(default=None, ge=0)
    message: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_shape(self) -> "ResultEnvelope":
        if self.status == ResultStatus.SUCCESS:
            if self.data is None or self.count != len(self.data):
                raise ValueError("success envelope requires data and count == len(data)")
        elif self.data is not None or self.count is not None:
            raise ValueError("failure envelope must not carry data or count")
        return self

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def to_wire(self) -> dict[str, Any]:
        """Plain dict for JSON: {status, data?, count?, message}; absent fields omitted."""
        out: dict[str, Any] = {"status": int(self.status)}
        if self.ok:
            out["data"] = self.data
            out["count"] = self.count
        out["message"] = self.message
        return out


def build_success(rows: Sequence[Any]) -> ResultEnvelope:
    data = list(rows)
    return ResultEnvelope(
        status=ResultStatus.SUCCESS,
        data=data,
        count=len(data),
        message=MSG_SUCCESS,
    )


def build_failure(message: str) -> ResultEnvelope:
    return ResultEnvelope(status=ResultStatus.FAILURE, message=message or MSG_EXCEPTION)
