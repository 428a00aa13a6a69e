"""Bounded, closable hand-off channel between the input reader and the workers.

`asyncio.Queue` has no notion of "closed and drained" before Python 3.13, so
the channel is a deque guarded by an `asyncio.Condition`:

- `send` waits while the buffer is full; it is the reader's backpressure.
- `receive` waits while the buffer is empty and the channel is still open.
- after `close`, receivers drain what is left and then stop.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import AsyncIterator, Generic, TypeVar

from core.domain.errors import ChannelClosedError

T = TypeVar("T")


class WorkChannel(Generic[T]):
    """Multi-producer/multi-consumer channel; each item reaches one consumer."""

    def __init__(self, capacity: int = 1) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._items: deque[T] = deque()
        self._closed = False
        self._cond = asyncio.Condition()

    def __len__(self) -> int:
        return len(self._items)

    async def send(self, item: T) -> None:
        async with self._cond:
            await self._cond.wait_for(lambda: self._closed or len(self._items) < self._capacity)
            if self._closed:
                raise ChannelClosedError("send on closed channel")
            self._items.append(item)
            self._cond.notify_all()

    async def receive(self) -> T:
        async with self._cond:
            await self._cond.wait_for(lambda: self._closed or bool(self._items))
            if self._items:
                item = self._items.popleft()
                self._cond.notify_all()
                return item
            raise ChannelClosedError("channel closed and drained")

    async def close(self) -> None:
        async with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None
