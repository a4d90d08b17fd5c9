"""Unit tests for ReadWriteLock.

Tests cover:
- Readers share the lock
- Writers exclude readers and other writers
- Waiting writers block new readers (writer preference)
- Cancelled waiting writers release queued readers
"""

import asyncio

import pytest

from rbac.core.locks import ReadWriteLock


@pytest.mark.unit
class TestReadWriteLock:
    """Test lock semantics."""

    @pytest.mark.asyncio
    async def test_readers_share_lock(self):
        lock = ReadWriteLock()
        both_inside = asyncio.Event()
        inside = 0

        async def reader():
            nonlocal inside
            async with lock.read():
                inside += 1
                if inside == 2:
                    both_inside.set()
                await asyncio.wait_for(both_inside.wait(), timeout=1)

        await asyncio.gather(reader(), reader())

        assert lock.readers == 0

    @pytest.mark.asyncio
    async def test_writer_waits_for_reader(self):
        lock = ReadWriteLock()
        order: list[str] = []
        release_reader = asyncio.Event()

        async def reader():
            async with lock.read():
                order.append("read_start")
                await release_reader.wait()
                order.append("read_end")

        async def writer():
            async with lock.write():
                order.append("write")

        reader_task = asyncio.create_task(reader())
        await asyncio.sleep(0)
        writer_task = asyncio.create_task(writer())
        await asyncio.sleep(0.01)

        assert order == ["read_start"]

        release_reader.set()
        await asyncio.gather(reader_task, writer_task)

        assert order == ["read_start", "read_end", "write"]

    @pytest.mark.asyncio
    async def test_writers_are_exclusive(self):
        lock = ReadWriteLock()
        active = 0
        peak = 0

        async def writer():
            nonlocal active, peak
            async with lock.write():
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.001)
                active -= 1

        await asyncio.gather(*(writer() for _ in range(5)))

        assert peak == 1
        assert lock.writer_active is False

    @pytest.mark.asyncio
    async def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        order: list[str] = []
        release_first = asyncio.Event()

        async def first_reader():
            async with lock.read():
                await release_first.wait()
                order.append("first_reader")

        async def writer():
            async with lock.write():
                order.append("writer")

        async def late_reader():
            async with lock.read():
                order.append("late_reader")

        tasks = [asyncio.create_task(first_reader())]
        await asyncio.sleep(0)
        tasks.append(asyncio.create_task(writer()))
        await asyncio.sleep(0)
        tasks.append(asyncio.create_task(late_reader()))
        await asyncio.sleep(0.01)

        release_first.set()
        await asyncio.gather(*tasks)

        assert order == ["first_reader", "writer", "late_reader"]

    @pytest.mark.asyncio
    async def test_cancelled_writer_releases_queued_readers(self):
        lock = ReadWriteLock()
        release_first = asyncio.Event()
        late_reader_done = asyncio.Event()

        async def first_reader():
            async with lock.read():
                await release_first.wait()

        async def writer():
            async with lock.write():
                pass

        async def late_reader():
            async with lock.read():
                late_reader_done.set()

        first = asyncio.create_task(first_reader())
        await asyncio.sleep(0)
        pending_writer = asyncio.create_task(writer())
        await asyncio.sleep(0)
        late = asyncio.create_task(late_reader())
        await asyncio.sleep(0.01)

        assert not late_reader_done.is_set()

        pending_writer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending_writer

        await asyncio.wait_for(late_reader_done.wait(), timeout=1)
        release_first.set()
        await asyncio.gather(first, late)
