from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from aiobotocore.config import AioConfig
from aiobotocore.session import get_session

from fanwrite.storage import ObjectWriter, StorageBackend


@dataclass
class S3Writer(ObjectWriter):
    client: Any
    bucket: str
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
        await self.client.put_object(Bucket=self.bucket, Key=self.key, Body=bytes(self.buffer))

    async def abort(self) -> None:
        # nothing has been sent yet, dropping the buffer is enough
        self.closed = True
        self.buffer.clear()


@dataclass
class S3Storage(StorageBackend):
    client: Any

    @classmethod
    @asynccontextmanager
    async def connect(
        cls,
        region: str,
        access_key_id: str | None = None,
        access_key_secret: str | None = None,
        endpoint: str | None = None,
        max_pool_connections: int = 100,
    ) -> AsyncIterator[S3Storage]:
        # leaving the keys unset defers to the default AWS credential chain
        session = get_session()
        config = AioConfig(max_pool_connections=max_pool_connections)
        async with session.create_client(
            "s3",
            region_name=region,
            endpoint_url=endpoint,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=access_key_secret,
            config=config,
        ) as client:
            yield cls(client)

    def open_writer(self, namespace: str, key: str) -> S3Writer:
        return S3Writer(self.client, namespace, key)
