from collections import defaultdict
from dataclasses import dataclass, field

from fanwrite.storage import ObjectWriter, StorageBackend


@dataclass
class InMemoryWriter(ObjectWriter):
    storage: dict[str, bytes]
    key: str
    buffer: bytearray = field(default_factory=bytearray)
    closed: bool = False

    async def write(self, data: bytes) -> None:
        if self.closed:
            raise RuntimeError("writer is closed")
        self.buffer.extend(data)

    async def close(self) -> None:
        if self.closed:
            raise RuntimeError("writer is closed")
        self.closed = True
        self.storage[self.key] = bytes(self.buffer)

    async def abort(self) -> None:
        self.closed = True
        self.buffer.clear()


@dataclass
class InMemoryBackend(StorageBackend):
    storage: dict[str, dict[str, bytes]] = field(
        default_factory=lambda: defaultdict(dict)
    )

    def open_writer(self, namespace: str, key: str) -> InMemoryWriter:
        return InMemoryWriter(self.storage[namespace], key)
