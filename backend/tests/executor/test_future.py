"""Unit tests for execute_with_future."""

import itertools
from concurrent.futures import ThreadPoolExecutor

import pytest

from dbexec.executor import (
    MSG_CONNECTION_FAILED,
    MSG_EXCEPTION,
    MSG_SUCCESS,
    AcquisitionError,
    ExecutionError,
    PoolExhaustedError,
    QueryFailedError,
    ReleaseError,
    ResultEnvelope,
    execute_with_future,
)
from tests.utils.provider import FakeProvider, InlineExecutor, rows


@pytest.fixture
def pool() -> ThreadPoolExecutor:
    ex = ThreadPoolExecutor(max_workers=2)
    yield ex
    ex.shutdown(wait=True)


def test_resolves_with_success_envelope(pool: ThreadPoolExecutor) -> None:
    p = FakeProvider(rows(3))
    env = execute_with_future(p, "SELECT * FROM t", None, executor=pool).result(timeout=5)
    assert env.to_wire() == {"status": 1, "data": rows(3), "count": 3, "message": MSG_SUCCESS}


def test_zero_rows(pool: ThreadPoolExecutor) -> None:
    env = execute_with_future(FakeProvider([]), "SELECT 1 WHERE false", executor=pool).result(5)
    assert (env.count, env.data) == (0, [])


def test_rejects_on_pool_exhausted(pool: ThreadPoolExecutor) -> None:
    p = FakeProvider(acquire_error=PoolExhaustedError("pool exhausted"))
    fut = execute_with_future(p, "SELECT 1", executor=pool)
    with pytest.raises(QueryFailedError) as ei:
        fut.result(timeout=5)
    assert ei.value.payload == {"status": 0, "message": MSG_CONNECTION_FAILED}
    assert p.calls == ["acquire"]


def test_rejects_with_driver_detail(pool: ThreadPoolExecutor) -> None:
    p = FakeProvider(run_error=ExecutionError("relation \"t\" does not exist"))
    fut = execute_with_future(p, "SELECT * FROM t", executor=pool)
    err = fut.exception(timeout=5)
    assert isinstance(err, QueryFailedError)
    assert err.envelope.message == 'operation failed: relation "t" does not exist'
    assert p.calls == ["acquire", "run", "release"]


def test_provider_raising_before_acquisition(pool: ThreadPoolExecutor) -> None:
    p = FakeProvider(acquire_error=RuntimeError("provider exploded"))
    err = execute_with_future(p, "SELECT 1", executor=pool).exception(timeout=5)
    assert isinstance(err, QueryFailedError)
    assert err.payload == {"status": 0, "message": MSG_EXCEPTION}


def test_setup_error_becomes_settled_rejection() -> None:
    fut = execute_with_future(object(), "SELECT 1")
    assert fut.done()
    assert fut.exception().payload == {"status": 0, "message": MSG_EXCEPTION}


def test_shut_down_executor_becomes_rejection() -> None:
    ex = ThreadPoolExecutor(max_workers=1)
    ex.shutdown()
    p = FakeProvider(rows(1))
    fut = execute_with_future(p, "SELECT 1", executor=ex)
    assert fut.exception(timeout=1).envelope.message == MSG_EXCEPTION
    assert p.calls == []


def test_release_failure_keeps_success(pool: ThreadPoolExecutor) -> None:
    p = FakeProvider(rows(3), release_error=ReleaseError("disconnect failed"))
    env = execute_with_future(p, "SELECT * FROM t", executor=pool).result(timeout=5)
    assert env.ok and env.count == 3


def test_released_before_settled() -> None:
    p = FakeProvider(rows(1))
    seen: list[list[str]] = []
    fut = execute_with_future(p, "SELECT 1", executor=InlineExecutor())
    fut.add_done_callback(lambda f: seen.append(list(p.calls)))
    assert seen == [["acquire", "run", "release"]]


def test_cannot_be_cancelled(pool: ThreadPoolExecutor) -> None:
    fut = execute_with_future(FakeProvider(rows(1)), "SELECT 1", executor=pool)
    assert fut.cancel() is False
    assert isinstance(fut.result(timeout=5), ResultEnvelope)


def test_uses_module_pool_by_default() -> None:
    env = execute_with_future(FakeProvider(rows(2)), "SELECT 1").result(timeout=5)
    assert env.count == 2


@pytest.mark.parametrize(
    "acquire_ok,run_ok,release_ok",
    list(itertools.product([True, False], repeat=3)),
)
def test_settles_exactly_once_matrix(acquire_ok: bool, run_ok: bool, release_ok: bool) -> None:
    # InlineExecutor surfaces a second settle as InvalidStateError from submit()
    ex = InlineExecutor()
    p = FakeProvider(
        rows(2),
        acquire_error=None if acquire_ok else AcquisitionError("down"),
        run_error=None if run_ok else ExecutionError("bad"),
        release_error=None if release_ok else ReleaseError("stuck"),
    )
    fut = execute_with_future(p, "SELECT 1", executor=ex)

    assert ex.submitted == 1
    assert fut.done()
    if acquire_ok and run_ok:
        assert fut.result().count == 2
    else:
        err = fut.exception()
        assert isinstance(err, QueryFailedError)
        assert set(err.payload) == {"status", "message"}
        assert err.payload["message"]
    if acquire_ok:
        assert p.calls == ["acquire", "run", "release"]
    else:
        assert p.calls == ["acquire"]


def test_provider_fault_while_binding_rejects() -> None:
    class Exploding:
        @property
        def acquire(self):
            raise RuntimeError("provider exploded")

        def run(self, conn, statement, params):
            return []

        def release(self, conn):
            pass

    fut = execute_with_future(Exploding(), "SELECT 1")
    assert fut.exception(timeout=1).payload == {"status": 0, "message": MSG_EXCEPTION}
