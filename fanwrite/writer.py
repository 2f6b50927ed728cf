from dataclasses import dataclass

import anyio
from loguru import logger

from fanwrite.storage import StorageBackend


@dataclass(frozen=True)
class Success:
    key: str


@dataclass(frozen=True)
class Failure:
    key: str
    error: str


WriteOutcome = Success | Failure


# time an abort may still take once the deadline has passed
ABORT_GRACE = 0.5


def describe(exc: BaseException, deadline: float) -> str:
    if isinstance(exc, TimeoutError) and anyio.current_time() >= deadline:
        return "deadline exceeded"
    return str(exc) or type(exc).__name__


def remaining(deadline: float) -> float:
    return deadline - anyio.current_time()


async def write_object(
    fs: StorageBackend,
    bucket: str,
    key: str,
    content: str,
    deadline: float,
) -> WriteOutcome:
    """Write one object, bounded by the absolute ``deadline`` (anyio clock).

    Never raises for backend problems: they come back as a ``Failure``.
    A finalize failure says nothing about whether the object exists.
    """
    writer = fs.open_writer(bucket, key)
    try:
        with anyio.fail_after(remaining(deadline)):
            await writer.write(content.encode())
    except Exception as exc:
        cause = describe(exc, deadline)
        try:
            with anyio.move_on_after(max(remaining(deadline), ABORT_GRACE)):
                await writer.abort()
        except Exception:
            # the write error is the one worth reporting
            pass
        return Failure(key, f"failed to write object {key}: {cause}")

    try:
        with anyio.fail_after(remaining(deadline)):
            await writer.close()
    except Exception as exc:
        return Failure(key, f"failed to finalize object {key}: {describe(exc, deadline)}")

    logger.debug("Successfully created object: {}", key)
    return Success(key)
