from __future__ import annotations

from dataclasses import dataclass, field
from time import perf_counter

import anyio
from anyio.streams.memory import MemoryObjectSendStream
from loguru import logger

from fanwrite.generate import generate_content, generate_key
from fanwrite.storage import StorageBackend
from fanwrite.writer import Failure, WriteOutcome, write_object

DEFAULT_TIMEOUT = 60.0
DEFAULT_OBJECT_SIZE = 1024


@dataclass
class AggregateResult:
    objects_written: int
    time_taken: float
    errors: list[str] = field(default_factory=list)


def _fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    digits = len(str(unit)) - 1
    frac_str = f"{frac:0{digits}d}".rstrip("0")
    return f"{whole}.{frac_str}" if frac_str else str(whole)


def format_duration(seconds: float) -> str:
    """Render a duration the compact way: ``1.5ms``, ``2.25s``, ``1m30s``, ``1h0m0s``."""
    ns = round(seconds * 1_000_000_000)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_fraction(ns, 1_000_000)}ms"
    minutes, ns = divmod(ns, 60 * 1_000_000_000)
    hours, minutes = divmod(minutes, 60)
    secs = f"{_fraction(ns, 1_000_000_000)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}"
    if minutes:
        return f"{sign}{minutes}m{secs}"
    return f"{sign}{secs}"


async def _write_one(
    fs: StorageBackend,
    bucket: str,
    content_length: int,
    deadline: float,
    outcomes: MemoryObjectSendStream[WriteOutcome],
) -> None:
    # entropy failures are deliberately not caught here
    key = generate_key()
    content = generate_content(content_length)
    outcome = await write_object(fs, bucket, key, content, deadline)
    if isinstance(outcome, Failure):
        logger.warning("Write failed: {}", outcome.error)
    outcomes.send_nowait(outcome)


async def run(
    count: int,
    fs: StorageBackend,
    bucket: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    content_length: int = DEFAULT_OBJECT_SIZE,
) -> AggregateResult:
    """Write ``count`` random objects concurrently and summarize the outcomes.

    All writes share one deadline, ``timeout`` seconds after dispatch.
    There is no concurrency limit and no rollback of objects already
    written when siblings fail.
    """
    if count <= 0:
        raise ValueError("count must be a positive integer")

    # sized so that no writer ever blocks on a full buffer
    send, receive = anyio.create_memory_object_stream[WriteOutcome](max_buffer_size=count)
    start = perf_counter()
    deadline = anyio.current_time() + timeout
    async with anyio.create_task_group() as tg:
        for _ in range(count):
            tg.start_soon(_write_one, fs, bucket, content_length, deadline, send)
    send.close()
    async with receive:
        outcomes = [outcome async for outcome in receive]
    elapsed = perf_counter() - start

    errors = [outcome.error for outcome in outcomes if isinstance(outcome, Failure)]
    return AggregateResult(
        objects_written=count - len(errors),
        time_taken=elapsed,
        errors=errors,
    )
