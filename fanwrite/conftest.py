import pytest

from fanwrite.storage.memory import InMemoryBackend


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fs() -> InMemoryBackend:
    return InMemoryBackend()
