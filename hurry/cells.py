"""Interior-mutability cells.

``Cell`` holds a plain value behind ``get``/``set`` with no bookkeeping.
``RefCell`` hands out scoped borrows and enforces the borrow rules at run
time: any number of shared borrows, or exactly one exclusive borrow, never
both at once.  A conflicting borrow raises immediately instead of blocking.

Usage::

    counter = RefCell([1, 2, 3])
    with counter.borrow_mut() as slot:
        slot.value.append(4)
    with counter.borrow() as items:
        print(items)
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class BorrowError(Exception):
    """A shared borrow was requested while an exclusive borrow is active."""


class BorrowMutError(BorrowError):
    """An exclusive borrow was requested while any other borrow is active."""


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------


class Cell(Generic[T]):
    """A mutable slot for small values, read by copy and written by replacement."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value

    def replace(self, value: T) -> T:
        """Store *value* and return the previous one."""
        old, self._value = self._value, value
        return old

    def take(self, default: Optional[T] = None) -> Optional[T]:
        """Return the current value, leaving *default* in its place."""
        return self.replace(default)  # type: ignore[arg-type]

    def into_inner(self) -> T:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Cell):
            return self._value == other._value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Cell({self._value!r})"


# ---------------------------------------------------------------------------
# RefCell
# ---------------------------------------------------------------------------

# Borrow state: 0 = free, n > 0 = n shared borrows, -1 = exclusively borrowed.
_EXCLUSIVE = -1


class Ref(Generic[T]):
    """Scoped shared borrow.  Entering yields the value itself."""

    def __init__(self, cell: "RefCell[T]") -> None:
        self._cell = cell

    def __enter__(self) -> T:
        self._cell._acquire_shared()
        return self._cell._value

    def __exit__(self, *exc_info: Any) -> None:
        self._cell._release_shared()


class RefMut(Generic[T]):
    """Scoped exclusive borrow.  Entering yields the guard; read or assign ``value``."""

    def __init__(self, cell: "RefCell[T]") -> None:
        self._cell = cell
        self._active = False

    @property
    def value(self) -> T:
        self._ensure_active()
        return self._cell._value

    @value.setter
    def value(self, new_value: T) -> None:
        self._ensure_active()
        self._cell._value = new_value

    def __enter__(self) -> "RefMut[T]":
        self._cell._acquire_exclusive()
        self._active = True
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._active = False
        self._cell._release_exclusive()

    def _ensure_active(self) -> None:
        if not self._active:
            raise BorrowMutError("RefMut used outside of its 'with' block")


class RefCell(Generic[T]):
    """A mutable container with run-time checked borrows.

    Borrows are taken when a ``with`` block is entered and released when it
    exits.  Borrow conflicts raise :class:`BorrowError` or
    :class:`BorrowMutError`; they never block.  This type is not thread-safe.
    """

    __slots__ = ("_value", "_state")

    def __init__(self, value: T) -> None:
        self._value = value
        self._state = 0

    def borrow(self) -> Ref[T]:
        return Ref(self)

    def borrow_mut(self) -> RefMut[T]:
        return RefMut(self)

    def replace(self, value: T) -> T:
        """Swap in *value* and return the old one; needs the cell to be free."""
        if self._state != 0:
            raise BorrowMutError("RefCell is already borrowed")
        old, self._value = self._value, value
        return old

    def into_inner(self) -> T:
        return self._value

    @property
    def is_borrowed(self) -> bool:
        return self._state != 0

    def _acquire_shared(self) -> None:
        if self._state == _EXCLUSIVE:
            raise BorrowError("RefCell is already mutably borrowed")
        self._state += 1

    def _release_shared(self) -> None:
        self._state -= 1

    def _acquire_exclusive(self) -> None:
        if self._state != 0:
            raise BorrowMutError("RefCell is already borrowed")
        self._state = _EXCLUSIVE

    def _release_exclusive(self) -> None:
        self._state = 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RefCell):
            return self._value == other._value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._state == _EXCLUSIVE:
            return "RefCell(<borrowed>)"
        return f"RefCell({self._value!r})"
