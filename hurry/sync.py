"""Lock-guarded values.

``Mutex`` serializes every holder; ``RwLock`` admits many readers or one
writer.  Both block until access is available and hand out guards meant for
``with`` blocks.  An exception escaping a block that holds exclusive access
poisons the lock: later acquisitions raise :class:`PoisonError` until
``clear_poison()`` is called, because the value may be half-updated.

Usage::

    counter = Mutex(0)
    with counter.lock() as guard:
        guard.value += 1
"""

from __future__ import annotations

import threading
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class PoisonError(Exception):
    """The lock was poisoned by an exception raised while it was held."""


class WouldBlock(Exception):
    """A non-blocking acquisition found the lock busy."""


# ---------------------------------------------------------------------------
# Mutex
# ---------------------------------------------------------------------------


class MutexGuard(Generic[T]):
    """Exclusive access to a ``Mutex`` value for the duration of a ``with`` block."""

    def __init__(self, mutex: "Mutex[T]", blocking: bool = True) -> None:
        self._mutex = mutex
        self._blocking = blocking
        self._held = False

    @property
    def value(self) -> T:
        self._ensure_held()
        return self._mutex._value

    @value.setter
    def value(self, new_value: T) -> None:
        self._ensure_held()
        self._mutex._value = new_value

    def __enter__(self) -> "MutexGuard[T]":
        if not self._mutex._lock.acquire(blocking=self._blocking):
            raise WouldBlock("Mutex is held by another owner")
        if self._mutex._poisoned:
            self._mutex._lock.release()
            raise PoisonError("Mutex was poisoned by an earlier failure")
        self._held = True
        return self

    def __exit__(self, exc_type: Optional[type], *exc_info: Any) -> None:
        self._held = False
        if exc_type is not None:
            self._mutex._poisoned = True
        self._mutex._lock.release()

    def _ensure_held(self) -> None:
        if not self._held:
            raise RuntimeError("MutexGuard used outside of its 'with' block")


class Mutex(Generic[T]):
    """A value that only one holder at a time may access."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.Lock()
        self._poisoned = False

    def lock(self) -> MutexGuard[T]:
        """Guard that blocks on entry until the mutex is free."""
        return MutexGuard(self)

    def try_lock(self) -> MutexGuard[T]:
        """Guard that raises :class:`WouldBlock` on entry if the mutex is busy."""
        return MutexGuard(self, blocking=False)

    def is_poisoned(self) -> bool:
        return self._poisoned

    def clear_poison(self) -> None:
        self._poisoned = False

    def into_inner(self) -> T:
        if self._poisoned:
            raise PoisonError("Mutex was poisoned by an earlier failure")
        return self._value

    def __repr__(self) -> str:
        if self._lock.locked():
            return "Mutex(<locked>)"
        return f"Mutex({self._value!r})"


# ---------------------------------------------------------------------------
# RwLock
# ---------------------------------------------------------------------------


class ReadGuard(Generic[T]):
    """Shared read access.  Entering yields the value itself."""

    def __init__(self, rwlock: "RwLock[T]") -> None:
        self._rwlock = rwlock

    def __enter__(self) -> T:
        self._rwlock._acquire_read()
        return self._rwlock._value

    def __exit__(self, *exc_info: Any) -> None:
        self._rwlock._release_read()


class WriteGuard(Generic[T]):
    """Exclusive write access.  Entering yields the guard; read or assign ``value``."""

    def __init__(self, rwlock: "RwLock[T]") -> None:
        self._rwlock = rwlock
        self._held = False

    @property
    def value(self) -> T:
        self._ensure_held()
        return self._rwlock._value

    @value.setter
    def value(self, new_value: T) -> None:
        self._ensure_held()
        self._rwlock._value = new_value

    def __enter__(self) -> "WriteGuard[T]":
        self._rwlock._acquire_write()
        self._held = True
        return self

    def __exit__(self, exc_type: Optional[type], *exc_info: Any) -> None:
        self._held = False
        self._rwlock._release_write(poison=exc_type is not None)

    def _ensure_held(self) -> None:
        if not self._held:
            raise RuntimeError("WriteGuard used outside of its 'with' block")


class RwLock(Generic[T]):
    """A value readable by many threads at once or writable by one.

    Waiting writers take priority over new readers so a steady stream of
    readers cannot starve them.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
        self._poisoned = False

    def read(self) -> ReadGuard[T]:
        return ReadGuard(self)

    def write(self) -> WriteGuard[T]:
        return WriteGuard(self)

    def is_poisoned(self) -> bool:
        return self._poisoned

    def clear_poison(self) -> None:
        with self._cond:
            self._poisoned = False

    def into_inner(self) -> T:
        if self._poisoned:
            raise PoisonError("RwLock was poisoned by an earlier failure")
        return self._value

    # -- Internal state transitions ----------------------------------------

    def _acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            if self._poisoned:
                raise PoisonError("RwLock was poisoned by an earlier failure")
            self._readers += 1

    def _release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def _acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            if self._poisoned:
                self._cond.notify_all()
                raise PoisonError("RwLock was poisoned by an earlier failure")
            self._writer = True

    def _release_write(self, poison: bool) -> None:
        with self._cond:
            self._writer = False
            if poison:
                self._poisoned = True
            self._cond.notify_all()

    def __repr__(self) -> str:
        return f"RwLock(readers={self._readers}, writer={self._writer})"
