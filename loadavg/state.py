"""
loadavg.state
AUTHOR: carter-vin

Shared sampler state (in memory only, never persisted)

Current responsibilities:
- Latest LoadSnapshot + latest error, published as one unit
- Many concurrent readers OR one writer (ReadWriteLock)

Design goals:
- Small surface area
- Readers never observe a half-updated triple
- Writer is never starved by a steady stream of readers
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from loadavg.model import ZERO_SNAPSHOT, LoadSnapshot


class ReadWriteLock:
    """
    Writer-preferring reader/writer lock

    New readers wait while a writer holds or is waiting for the lock.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class StateStore:
    """
    Single source of truth for the published snapshot and error

    The sampler is the only writer.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._snapshot: LoadSnapshot = ZERO_SNAPSHOT
        self._error: Optional[BaseException] = None

    def read(self) -> tuple[LoadSnapshot, Optional[BaseException]]:
        with self._lock.read_locked():
            return self._snapshot, self._error

    def publish(self, snapshot: LoadSnapshot, error: Optional[BaseException] = None) -> None:
        with self._lock.write_locked():
            self._snapshot = snapshot
            self._error = error

    def record_error(self, error: BaseException) -> None:
        """
        Replace the error, keep the previous snapshot
        """
        with self._lock.write_locked():
            self._error = error
