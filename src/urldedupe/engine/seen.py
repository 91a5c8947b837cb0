"""Thread-safe set of canonical keys seen during a run.

The set grows for the lifetime of one run and has no removal operation.
Check-and-insert is atomic, so one ``SeenSet`` can be shared by several
threads processing shards of the same input.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class RWLock:
    """Reader/writer lock.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so writers are not starved.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
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
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SeenSet:
    """Set of canonical keys with a linearizable check-and-insert.

    Example:
        >>> seen = SeenSet()
        >>> seen.should_include("http://a.com/x")
        True
        >>> seen.should_include("http://a.com/x")
        False
    """

    def __init__(self) -> None:
        self._keys: set[str] = set()
        self._lock = RWLock()

    def should_include(self, key: str) -> bool:
        """Record ``key`` if it is new.

        Args:
            key: Canonical deduplication key

        Returns:
            True on the first observation of ``key``, False afterwards
        """
        with self._lock.write():
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._keys

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._keys)
