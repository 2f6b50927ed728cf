from functools import lru_cache
from typing import Annotated, Any, Callable, TypeVar

from fastapi import Depends, FastAPI

T = TypeVar("T")


@lru_cache(maxsize=None)
def provider(tp: type) -> Callable[[], Any]:
    """One placeholder dependency per type, replaced by ``bind``."""

    def unbound() -> Any:
        raise RuntimeError(f"no {tp.__name__} bound to this app")

    unbound.__name__ = f"provide_{tp.__name__}"
    return unbound


def bind(app: FastAPI, tp: type[T], value: T) -> None:
    app.dependency_overrides[provider(tp)] = lambda: value


class Injected:
    """``Injected[Config]`` resolves to whatever was bound for ``Config``."""

    def __class_getitem__(cls, tp: type) -> Any:
        return Annotated[tp, Depends(provider(tp))]
