"""Shared concurrency primitives.

asyncio ships a mutex, a semaphore and a condition but no reader/writer
lock.  :class:`ReadWriteLock` fills that gap for state that is read by
every request and replaced only occasionally, such as the Spotify access
credential:

- any number of readers may hold the lock at once;
- a writer holds it alone, blocking readers and other writers;
- once a writer is waiting, new readers queue behind it so a steady stream
  of searches cannot starve a credential renewal.

Usage::

    lock = ReadWriteLock()

    async with lock.read():
        snapshot = shared_state

    async with lock.write():
        shared_state = replacement
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class ReadWriteLock:
    """Writer-preferring reader/writer lock for asyncio tasks."""

    def __init__(self) -> None:
        self._condition = asyncio.Condition()
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        """Number of tasks currently holding the read side."""
        return self._readers

    @property
    def writer_active(self) -> bool:
        """``True`` while a task holds the write side."""
        return self._writer_active

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        """Hold the shared side of the lock for the duration of the block."""
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._writer_active and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        """Hold the exclusive side of the lock for the duration of the block."""
        async with self._condition:
            self._writers_waiting += 1
            try:
                await self._condition.wait_for(
                    lambda: not self._writer_active and self._readers == 0
                )
            except BaseException:
                # A cancelled writer must release the readers queued behind it.
                self._writers_waiting -= 1
                self._condition.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            async with self._condition:
                self._writer_active = False
                self._condition.notify_all()
