"""Storage doubles for exercising failure paths."""

from dataclasses import dataclass, field

import anyio

from fanwrite.storage import ObjectWriter
from fanwrite.storage.memory import InMemoryBackend


class BackendError(Exception):
    pass


@dataclass
class FailingWriter(ObjectWriter):
    inner: ObjectWriter
    fail_write: bool = False
    fail_close: bool = False
    aborted: bool = False

    async def write(self, data: bytes) -> None:
        await anyio.sleep(0)
        if self.fail_write:
            raise BackendError("connection reset by peer")
        await self.inner.write(data)

    async def close(self) -> None:
        await anyio.sleep(0)
        if self.fail_close:
            raise BackendError("precondition failed")
        await self.inner.close()

    async def abort(self) -> None:
        self.aborted = True
        raise BackendError("abort failed too")


@dataclass
class FlakyBackend:
    """Fails the writes (or finalizes) of the given 0-based open ordinals."""

    inner: InMemoryBackend = field(default_factory=InMemoryBackend)
    fail_writes: set[int] = field(default_factory=set)
    fail_closes: set[int] = field(default_factory=set)
    opened: list[str] = field(default_factory=list)
    failed_keys: list[str] = field(default_factory=list)
    writers: list[FailingWriter] = field(default_factory=list)

    def open_writer(self, namespace: str, key: str) -> FailingWriter:
        ordinal = len(self.opened)
        self.opened.append(key)
        fail_write = ordinal in self.fail_writes
        fail_close = ordinal in self.fail_closes
        if fail_write or fail_close:
            self.failed_keys.append(key)
        writer = FailingWriter(
            self.inner.open_writer(namespace, key),
            fail_write=fail_write,
            fail_close=fail_close,
        )
        self.writers.append(writer)
        return writer


@dataclass
class HangingWriter(ObjectWriter):
    async def write(self, data: bytes) -> None:
        await anyio.sleep_forever()

    async def close(self) -> None:
        await anyio.sleep_forever()

    async def abort(self) -> None:
        pass


@dataclass
class HangingBackend:
    hang_on: set[int] | None = None
    inner: InMemoryBackend = field(default_factory=InMemoryBackend)
    opened: list[str] = field(default_factory=list)

    def open_writer(self, namespace: str, key: str) -> ObjectWriter:
        ordinal = len(self.opened)
        self.opened.append(key)
        if self.hang_on is None or ordinal in self.hang_on:
            return HangingWriter()
        return self.inner.open_writer(namespace, key)


@dataclass
class ErrorWriter(ObjectWriter):
    error: Exception

    async def write(self, data: bytes) -> None:
        await anyio.sleep(0)
        raise self.error

    async def close(self) -> None:
        pass

    async def abort(self) -> None:
        pass


@dataclass
class ErrorBackend:
    """Every write raises ``error``, as a backend-side failure would."""

    error: Exception

    def open_writer(self, namespace: str, key: str) -> ErrorWriter:
        return ErrorWriter(self.error)


class StuckAbortWriter(HangingWriter):
    async def abort(self) -> None:
        await anyio.sleep_forever()


@dataclass
class StuckAbortBackend:
    opened: list[str] = field(default_factory=list)

    def open_writer(self, namespace: str, key: str) -> StuckAbortWriter:
        self.opened.append(key)
        return StuckAbortWriter()
