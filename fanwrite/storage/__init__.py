from typing import Protocol


class ObjectWriter(Protocol):
    async def write(self, data: bytes) -> None: ...

    async def close(self) -> None:
        """Commit the object. It is only visible once this returns."""
        ...

    async def abort(self) -> None: ...


class StorageBackend(Protocol):
    def open_writer(self, namespace: str, key: str) -> ObjectWriter: ...
