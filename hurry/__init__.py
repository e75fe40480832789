"""hurry -- shorthand constructors for ownership wrappers and your own types.

The wrapper catalog is re-exported at the top level::

    from hurry import arc_mutex, vec_box, shorthand
"""

from hurry.catalog import (
    CATALOG,
    arc,
    arc_mutex,
    arc_rwlock,
    boxx,
    cell,
    cow_borrowed,
    cow_owned,
    get_entry,
    mutex,
    pin_box,
    rc,
    rc_refcell,
    refcell,
    rwlock,
    unwrap,
    vec_arc,
    vec_box,
    vec_rc,
)
from hurry.shorthand import shorthand

__version__ = "0.1.0"

__all__ = [
    "CATALOG",
    "arc",
    "arc_mutex",
    "arc_rwlock",
    "boxx",
    "cell",
    "cow_borrowed",
    "cow_owned",
    "get_entry",
    "mutex",
    "pin_box",
    "rc",
    "rc_refcell",
    "refcell",
    "rwlock",
    "shorthand",
    "unwrap",
    "vec_arc",
    "vec_box",
    "vec_rc",
]
