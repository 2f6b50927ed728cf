import anyio
import pytest

from fanwrite.testing import ErrorBackend, FlakyBackend, HangingBackend, StuckAbortBackend
from fanwrite.storage.memory import InMemoryBackend
from fanwrite.writer import Failure, Success, write_object


def deadline(seconds: float = 5.0) -> float:
    return anyio.current_time() + seconds


@pytest.mark.anyio
async def test_write_success(fs: InMemoryBackend) -> None:
    outcome = await write_object(fs, "bucket", "a/b", "hello", deadline())
    assert outcome == Success("a/b")
    assert fs.storage["bucket"]["a/b"] == b"hello"


@pytest.mark.anyio
async def test_write_failure_aborts_and_reports_key() -> None:
    fs = FlakyBackend(fail_writes={0})
    outcome = await write_object(fs, "bucket", "a/b", "hello", deadline())
    assert isinstance(outcome, Failure)
    assert outcome.key == "a/b"
    assert outcome.error == "failed to write object a/b: connection reset by peer"
    # the abort error is swallowed, the write error wins
    assert fs.writers[0].aborted
    assert "a/b" not in fs.inner.storage["bucket"]


@pytest.mark.anyio
async def test_finalize_failure() -> None:
    fs = FlakyBackend(fail_closes={0})
    outcome = await write_object(fs, "bucket", "a/b", "hello", deadline())
    assert outcome == Failure("a/b", "failed to finalize object a/b: precondition failed")
    assert not fs.writers[0].aborted


@pytest.mark.anyio
async def test_deadline_exceeded() -> None:
    fs = HangingBackend()
    with anyio.fail_after(2):
        outcome = await write_object(fs, "bucket", "a/b", "hello", deadline(0.05))
    assert outcome == Failure("a/b", "failed to write object a/b: deadline exceeded")


@pytest.mark.anyio
async def test_deadline_already_passed() -> None:
    fs = FlakyBackend()
    outcome = await write_object(fs, "bucket", "a/b", "hello", anyio.current_time() - 1)
    assert isinstance(outcome, Failure)
    assert "deadline exceeded" in outcome.error


@pytest.mark.anyio
async def test_backend_timeout_is_not_the_deadline() -> None:
    fs = ErrorBackend(TimeoutError("read timed out"))
    outcome = await write_object(fs, "bucket", "a/b", "hello", deadline())
    assert outcome == Failure("a/b", "failed to write object a/b: read timed out")


@pytest.mark.anyio
async def test_bare_backend_timeout_uses_the_type_name() -> None:
    fs = ErrorBackend(TimeoutError())
    outcome = await write_object(fs, "bucket", "a/b", "hello", deadline())
    assert outcome == Failure("a/b", "failed to write object a/b: TimeoutError")


@pytest.mark.anyio
async def test_stuck_abort_is_bounded() -> None:
    fs = StuckAbortBackend()
    with anyio.fail_after(3):
        outcome = await write_object(fs, "bucket", "a/b", "hello", deadline(0.05))
    assert outcome == Failure("a/b", "failed to write object a/b: deadline exceeded")
