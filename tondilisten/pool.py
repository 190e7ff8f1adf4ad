"""A single-slot connection pool that replaces its element once it is no longer live."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Protocol, TypeVar, Union


class _HealthCheck(Protocol):
    def is_live(self) -> bool: ...


T = TypeVar("T", bound=_HealthCheck)
M = TypeVar("M")


class PoolError(Exception):
    """Raised when the pool cannot hand out a live element."""


class Pool(Generic[M, T]):
    """Holds one element and rebuilds it from ``meta`` when it stops being live.

    ``factory`` is called with ``meta`` and may return the new element
    directly or as an awaitable.
    """

    def __init__(
        self,
        meta: M,
        initial: T,
        factory: Callable[[M], Union[T, Awaitable[T]]],
    ) -> None:
        self.meta = meta
        self._item = initial
        self._factory = factory
        self._refreshing = asyncio.Lock()

    async def _build(self) -> Any:
        try:
            result = self._factory(self.meta)
            if inspect.isawaitable(result):
                result = await result
        except PoolError:
            raise
        except Exception as exc:
            raise PoolError(str(exc)) from exc
        return result

    async def get(self) -> T:
        """Return the live element, rebuilding it first if needed.

        Raises PoolError while another caller is rebuilding it, or when
        rebuilding fails.
        """
        if self._refreshing.locked():
            raise PoolError("try_lock failed because the operation would block")
        if self._item.is_live():
            return self._item
        async with self._refreshing:
            self._item = await self._build()
        return self._item