"""Owning and shared pointer wrappers.

* ``Box``     -- exclusive ownership of a single value.
* ``PinBox``  -- like ``Box`` but the held value can never be swapped out.
* ``Rc``      -- shared ownership with an explicit strong count.
* ``Arc``     -- ``Rc`` whose count updates are safe across threads.
* ``Cow``     -- copy-on-write: borrows a value until a mutable view is needed.

Python manages memory itself; these types model the ownership contract
(who may replace the value, how many handles exist) rather than allocation.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class OwnershipError(Exception):
    """Raised when an operation needs sole ownership of a shared value."""


# ---------------------------------------------------------------------------
# Box / PinBox
# ---------------------------------------------------------------------------


class Box(Generic[T]):
    """Exclusive owner of a single value."""

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def into_inner(self) -> T:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Box):
            return self.value == other.value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class PinBox(Generic[T]):
    """A box whose value stays in place for its whole lifetime.

    The contents may still be mutated in place; only rebinding is refused.
    """

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        object.__setattr__(self, "_value", value)

    @property
    def value(self) -> T:
        return self._value

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is pinned; its value cannot be replaced")

    def into_inner(self) -> T:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PinBox):
            return self._value == other._value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PinBox({self._value!r})"


# ---------------------------------------------------------------------------
# Rc / Arc
# ---------------------------------------------------------------------------


class _Shared(Generic[T]):
    __slots__ = ("value", "strong")

    def __init__(self, value: T) -> None:
        self.value = value
        self.strong = 1


class Rc(Generic[T]):
    """Shared ownership through counted handles.

    ``clone()`` hands out another handle to the same value; ``drop()``
    releases one.  The value is read-only through the handle.  Use a
    ``RefCell`` inside for shared mutation.
    """

    __slots__ = ("_shared", "_dropped")

    def __init__(self, value: T) -> None:
        self._shared: _Shared[T] = _Shared(value)
        self._dropped = False

    @classmethod
    def _from_shared(cls, shared: _Shared[T]) -> "Rc[T]":
        handle = cls.__new__(cls)
        handle._shared = shared
        handle._dropped = False
        return handle

    @property
    def value(self) -> T:
        self._ensure_live()
        return self._shared.value

    def clone(self) -> "Rc[T]":
        self._ensure_live()
        self._adjust(1)
        return self._from_shared(self._shared)

    def strong_count(self) -> int:
        return self._shared.strong

    def ptr_eq(self, other: "Rc[Any]") -> bool:
        """``True`` if both handles share the same allocation."""
        return self._shared is other._shared

    def drop(self) -> None:
        """Release this handle.  Dropping twice is a no-op."""
        if not self._dropped:
            self._dropped = True
            self._adjust(-1)

    def into_inner(self) -> T:
        """Consume the handle and return the value if it is the only owner.

        Raises:
            OwnershipError: If other handles are still alive.
        """
        self._ensure_live()
        if self._shared.strong != 1:
            raise OwnershipError(
                f"{type(self).__name__} has {self._shared.strong} strong handles; cannot take the value"
            )
        self.drop()
        return self._shared.value

    def _adjust(self, delta: int) -> None:
        self._shared.strong += delta

    def _ensure_live(self) -> None:
        if self._dropped:
            raise OwnershipError(f"{type(self).__name__} handle was already dropped")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Rc):
            return self._shared.value == other._shared.value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._shared.value!r})"


class _AtomicShared(_Shared[T]):
    __slots__ = ("lock",)

    def __init__(self, value: T) -> None:
        super().__init__(value)
        self.lock = threading.Lock()


class Arc(Rc[T]):
    """``Rc`` whose handle bookkeeping is serialized by a per-allocation lock."""

    __slots__ = ()

    def __init__(self, value: T) -> None:
        self._shared = _AtomicShared(value)
        self._dropped = False

    def clone(self) -> "Arc[T]":
        with self._shared.lock:
            self._ensure_live()
            self._shared.strong += 1
        return self._from_shared(self._shared)

    def drop(self) -> None:
        with self._shared.lock:
            if not self._dropped:
                self._dropped = True
                self._shared.strong -= 1

    def into_inner(self) -> T:
        with self._shared.lock:
            self._ensure_live()
            if self._shared.strong != 1:
                raise OwnershipError(
                    f"Arc has {self._shared.strong} strong handles; cannot take the value"
                )
            self._dropped = True
            self._shared.strong = 0
            return self._shared.value


# ---------------------------------------------------------------------------
# Cow
# ---------------------------------------------------------------------------


class Cow(Generic[T]):
    """Copy-on-write container in either borrowed or owned mode.

    A borrowed ``Cow`` shares the caller's object without copying it.  The
    first call to :meth:`to_mut` copies it and switches to owned mode, so the
    original is never modified.
    """

    __slots__ = ("_value", "_owned")

    def __init__(self, value: T, owned: bool) -> None:
        self._value = value
        self._owned = owned

    @classmethod
    def borrowed(cls, value: T) -> "Cow[T]":
        return cls(value, owned=False)

    @classmethod
    def owned(cls, value: T) -> "Cow[T]":
        return cls(value, owned=True)

    @property
    def value(self) -> T:
        return self._value

    @property
    def is_borrowed(self) -> bool:
        return not self._owned

    @property
    def is_owned(self) -> bool:
        return self._owned

    def to_mut(self) -> T:
        """Return a value safe to mutate, copying a borrowed value first."""
        if not self._owned:
            self._value = copy.copy(self._value)
            self._owned = True
        return self._value

    def into_owned(self) -> T:
        if self._owned:
            return self._value
        return copy.copy(self._value)

    def into_inner(self) -> T:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Cow):
            return self._value == other._value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        mode = "Owned" if self._owned else "Borrowed"
        return f"Cow.{mode}({self._value!r})"
