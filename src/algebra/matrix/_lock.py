"""Reader/Writer Locks.

Synchronization primitives guarding matrix storage.

    - RWLock: any number of readers or a single writer. Waiting writers
      block new readers so a steady stream of readers cannot starve
      them. The writing thread may re-enter the write lock and may take
      the read lock while writing.
    - NullLock: identical interface, no synchronization. Used by
      matrices built on the unshared path.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

__all__ = ['RWLock', 'NullLock']


# =============================================================================
# Reader/Writer Lock
# =============================================================================

class RWLock:
    """Writer-preferring reader/writer lock.

    Example:
        >>> lock = RWLock()
        >>> with lock.read_locked():
        ...     value = storage[k]
        >>> with lock.write_locked():
        ...     storage[k] = value
    """

    __slots__ = ('_cond', '_readers', '_writer', '_write_depth', '_writers_waiting')

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer: Optional[int] = None
        self._write_depth = 0
        self._writers_waiting = 0

    def _owns_write(self) -> bool:
        return self._writer == threading.get_ident()

    # -------------------------------------------------------------------------
    # Shared Mode
    # -------------------------------------------------------------------------

    def acquire_read(self) -> None:
        """Acquire the lock in shared mode."""
        with self._cond:
            if self._owns_write():
                # Reads nested inside our own write section.
                self._write_depth += 1
                return
            while self._writer is not None or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        """Release a shared acquisition."""
        with self._cond:
            if self._owns_write():
                self._write_depth -= 1
                return
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a matching acquire")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    # -------------------------------------------------------------------------
    # Exclusive Mode
    # -------------------------------------------------------------------------

    def acquire_write(self) -> None:
        """Acquire the lock in exclusive mode."""
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                return
            self._writers_waiting += 1
            try:
                while self._writer is not None or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = me
            self._write_depth = 1

    def release_write(self) -> None:
        """Release an exclusive acquisition."""
        with self._cond:
            if not self._owns_write():
                raise RuntimeError("release_write() called by a thread not holding the lock")
            self._write_depth -= 1
            if self._write_depth == 0:
                self._writer = None
                self._cond.notify_all()

    # -------------------------------------------------------------------------
    # Context Managers
    # -------------------------------------------------------------------------

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def is_shared(self) -> bool:
        return True

    def __repr__(self) -> str:
        return (
            f"RWLock(readers={self._readers}, "
            f"writing={self._writer is not None}, "
            f"writers_waiting={self._writers_waiting})"
        )


# =============================================================================
# No-op Lock
# =============================================================================

class NullLock:
    """Lock with the RWLock interface that never blocks."""

    __slots__ = ()

    def acquire_read(self) -> None:
        pass

    def release_read(self) -> None:
        pass

    def acquire_write(self) -> None:
        pass

    def release_write(self) -> None:
        pass

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        yield

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        yield

    @property
    def is_shared(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NullLock()"
