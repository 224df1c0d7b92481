"""
Tests for the read/write lock
"""

import pytest
import threading
import time

from bank_demo.locks import ReadWriteLock


class TestReadWriteLock:
    """Test shared and exclusive locking"""

    def test_readers_share_the_lock(self):
        """Test that several readers hold the lock together"""
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=5)

        def reader():
            with lock.read_locked():
                # All three must be inside at once to pass the barrier
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert not any(thread.is_alive() for thread in threads)
        assert lock.readers == 0

    def test_writer_excludes_readers(self):
        """Test that a reader waits for an active writer"""
        lock = ReadWriteLock()
        events = []

        lock.acquire_write()
        reader = threading.Thread(target=lambda: (lock.acquire_read(), events.append("read"), lock.release_read()))
        reader.start()
        time.sleep(0.05)
        assert events == []

        events.append("write-done")
        lock.release_write()
        reader.join(timeout=5)

        assert events == ["write-done", "read"]

    def test_writer_waits_for_readers(self):
        """Test that a writer waits until readers leave"""
        lock = ReadWriteLock()
        acquired = threading.Event()

        lock.acquire_read()
        writer = threading.Thread(target=lambda: (lock.acquire_write(), acquired.set(), lock.release_write()))
        writer.start()

        assert not acquired.wait(0.05)
        lock.release_read()
        assert acquired.wait(5)
        writer.join(timeout=5)

    def test_waiting_writer_blocks_new_readers(self):
        """Test writer preference"""
        lock = ReadWriteLock()
        order = []

        lock.acquire_read()
        writer = threading.Thread(target=lambda: (lock.acquire_write(), order.append("writer"), lock.release_write()))
        writer.start()
        time.sleep(0.05)

        reader = threading.Thread(target=lambda: (lock.acquire_read(), order.append("reader"), lock.release_read()))
        reader.start()
        time.sleep(0.05)
        assert order == []

        lock.release_read()
        writer.join(timeout=5)
        reader.join(timeout=5)
        assert order == ["writer", "reader"]

    def test_context_managers_release_on_error(self):
        """Test release when the body raises"""
        lock = ReadWriteLock()

        with pytest.raises(ValueError):
            with lock.write_locked():
                raise ValueError("boom")
        assert not lock.write_held

        with pytest.raises(ValueError):
            with lock.read_locked():
                raise ValueError("boom")
        assert lock.readers == 0

    def test_release_without_acquire(self):
        """Test unbalanced releases"""
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()
