"""Async reader/writer lock.

Permission checks share the lock; hierarchy and assignment mutations take
it exclusively so a check never observes half of a check-then-write
sequence. Writers are preferred: once a writer is waiting, new readers
queue behind it so a steady stream of checks cannot starve mutations.

Usage:
    lock = ReadWriteLock()

    async with lock.read():
        ...  # any number of concurrent readers

    async with lock.write():
        ...  # exclusive
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class ReadWriteLock:
    """Writer-preferring asyncio reader/writer lock.

    Not thread-safe; bound to the event loop that first uses it.
    """

    def __init__(self) -> None:
        self._condition = asyncio.Condition()
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        """Number of readers currently holding the lock."""
        return self._readers

    @property
    def writer_active(self) -> bool:
        """True while a writer holds the lock."""
        return self._writer_active

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        """Acquire the shared side of the lock."""
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
        """Acquire the exclusive side of the lock."""
        async with self._condition:
            self._writers_waiting += 1
            try:
                await self._condition.wait_for(
                    lambda: not self._writer_active and self._readers == 0
                )
            except BaseException:
                # Cancelled while queued: readers blocked on us must re-check.
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
