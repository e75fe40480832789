"""Wrapper catalog: one short factory per ownership shape.

Every scalar factory takes exactly one value and never fails; every sequence
factory takes any number of values and returns a list of independently
wrapped values in argument order::

    from hurry.catalog import arc_mutex, vec_box

    counter = arc_mutex(0)
    boxes = vec_box(1, 2, 3)

``CATALOG`` describes each factory, and :func:`unwrap` recovers the value a
wrapper holds.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .cells import Cell, RefCell
from .pointers import Arc, Box, Cow, PinBox, Rc
from .sync import Mutex, RwLock

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Scalar factories
# ---------------------------------------------------------------------------

def boxx(value: T) -> Box[T]:
    return Box(value)


def rc(value: T) -> Rc[T]:
    return Rc(value)


def arc(value: T) -> Arc[T]:
    return Arc(value)


def pin_box(value: T) -> PinBox[T]:
    return PinBox(value)


def cell(value: T) -> Cell[T]:
    return Cell(value)


def refcell(value: T) -> RefCell[T]:
    return RefCell(value)


def rc_refcell(value: T) -> Rc[RefCell[T]]:
    return Rc(RefCell(value))


def mutex(value: T) -> Mutex[T]:
    return Mutex(value)


def rwlock(value: T) -> RwLock[T]:
    return RwLock(value)


def arc_mutex(value: T) -> Arc[Mutex[T]]:
    return Arc(Mutex(value))


def arc_rwlock(value: T) -> Arc[RwLock[T]]:
    return Arc(RwLock(value))


def cow_owned(value: T) -> Cow[T]:
    return Cow.owned(value)


def cow_borrowed(value: T) -> Cow[T]:
    return Cow.borrowed(value)


# ---------------------------------------------------------------------------
# Sequence factories
# ---------------------------------------------------------------------------

def vec_box(*values: T) -> list[Box[T]]:
    return [Box(v) for v in values]


def vec_rc(*values: T) -> list[Rc[T]]:
    return [Rc(v) for v in values]


def vec_arc(*values: T) -> list[Arc[T]]:
    return [Arc(v) for v in values]


# ---------------------------------------------------------------------------
# Unwrapping
# ---------------------------------------------------------------------------

def unwrap(wrapped: Any, layers: int = 1) -> Any:
    """Return the value held by a catalog wrapper.

    *layers* says how many wrappers to peel: ``unwrap(arc_mutex(5), 2) == 5``.
    Sequences from the ``vec_*`` factories unwrap element-wise.  Shared
    pointers must be the sole owner.
    """
    if isinstance(wrapped, list):
        return [unwrap(item, layers) for item in wrapped]
    value = wrapped
    for _ in range(layers):
        value = value.into_inner()
    return value


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class WrapperKind(str, Enum):
    """Ownership / interior-mutability shape produced by a factory."""
    EXCLUSIVE = "exclusive"
    SHARED = "shared"
    ATOMIC_SHARED = "atomic_shared"
    PINNED = "pinned"
    COPY_CELL = "copy_cell"
    BORROW_CELL = "borrow_cell"
    MUTEX = "mutex"
    RWLOCK = "rwlock"
    COPY_ON_WRITE = "copy_on_write"


class WrapperEntry(BaseModel):
    """A catalog factory and the shape it produces."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(..., description="Factory name, e.g. 'arc_mutex'")
    kind: WrapperKind = Field(..., description="Outermost-relevant ownership shape")
    arity: Optional[int] = Field(
        default=1, description="1 for scalar factories, None for sequence factories"
    )
    layers: int = Field(default=1, ge=1, description="Wrapper layers the factory nests")
    factory: Callable[..., Any] = Field(..., description="The factory function")

    @property
    def is_sequence(self) -> bool:
        return self.arity is None

    def wrap(self, *values: Any) -> Any:
        return self.factory(*values)

    def unwrap(self, wrapped: Any) -> Any:
        """Inverse of :meth:`wrap`: peel exactly the layers this factory adds."""
        return unwrap(wrapped, self.layers)


def _entry(
    factory: Callable[..., Any],
    kind: WrapperKind,
    arity: Optional[int] = 1,
    layers: int = 1,
) -> WrapperEntry:
    return WrapperEntry(
        name=factory.__name__, kind=kind, arity=arity, layers=layers, factory=factory
    )


CATALOG: dict[str, WrapperEntry] = {
    entry.name: entry
    for entry in (
        _entry(boxx, WrapperKind.EXCLUSIVE),
        _entry(rc, WrapperKind.SHARED),
        _entry(arc, WrapperKind.ATOMIC_SHARED),
        _entry(pin_box, WrapperKind.PINNED),
        _entry(cell, WrapperKind.COPY_CELL),
        _entry(refcell, WrapperKind.BORROW_CELL),
        _entry(rc_refcell, WrapperKind.BORROW_CELL, layers=2),
        _entry(mutex, WrapperKind.MUTEX),
        _entry(rwlock, WrapperKind.RWLOCK),
        _entry(arc_mutex, WrapperKind.MUTEX, layers=2),
        _entry(arc_rwlock, WrapperKind.RWLOCK, layers=2),
        _entry(cow_owned, WrapperKind.COPY_ON_WRITE),
        _entry(cow_borrowed, WrapperKind.COPY_ON_WRITE),
        _entry(vec_box, WrapperKind.EXCLUSIVE, arity=None),
        _entry(vec_rc, WrapperKind.SHARED, arity=None),
        _entry(vec_arc, WrapperKind.ATOMIC_SHARED, arity=None),
    )
}


def get_entry(name: str) -> WrapperEntry:
    """Look up a catalog entry by factory name.

    Raises:
        KeyError: If no factory has that name.
    """
    try:
        return CATALOG[name]
    except KeyError:
        raise KeyError(f"Unknown wrapper {name!r}; expected one of {sorted(CATALOG)}") from None
