"""Tests for the wrapper catalog: factories, registry and unwrapping."""

from __future__ import annotations

import pytest

import hurry
from hurry.catalog import (
    CATALOG,
    WrapperKind,
    arc,
    arc_mutex,
    boxx,
    cow_borrowed,
    get_entry,
    rc_refcell,
    unwrap,
    vec_arc,
    vec_box,
    vec_rc,
)
from hurry.cells import RefCell
from hurry.pointers import Arc, Box, Rc
from hurry.sync import Mutex


pytestmark = pytest.mark.unit


SCALARS = sorted(name for name, entry in CATALOG.items() if not entry.is_sequence)
SEQUENCES = sorted(name for name, entry in CATALOG.items() if entry.is_sequence)


class TestRegistry:
    def test_expected_factories(self):
        assert set(CATALOG) == {
            "boxx", "rc", "arc", "pin_box", "cell", "refcell", "rc_refcell",
            "mutex", "rwlock", "arc_mutex", "arc_rwlock", "cow_owned",
            "cow_borrowed", "vec_box", "vec_rc", "vec_arc",
        }

    def test_sequence_split(self):
        assert SEQUENCES == ["vec_arc", "vec_box", "vec_rc"]

    def test_nested_entries_have_two_layers(self):
        assert {name for name, e in CATALOG.items() if e.layers == 2} == {
            "rc_refcell", "arc_mutex", "arc_rwlock",
        }

    def test_get_entry(self):
        entry = get_entry("arc_mutex")
        assert entry.kind == WrapperKind.MUTEX
        assert entry.factory is arc_mutex

    def test_get_entry_unknown(self):
        with pytest.raises(KeyError, match="Unknown wrapper 'boxed'"):
            get_entry("boxed")

    def test_package_reexports(self):
        assert hurry.boxx is boxx
        assert hurry.CATALOG is CATALOG


class TestFactories:
    def test_nested_shapes(self):
        assert isinstance(rc_refcell(1), Rc)
        assert isinstance(rc_refcell(1).value, RefCell)
        assert isinstance(arc_mutex(1), Arc)
        assert isinstance(arc_mutex(1).value, Mutex)

    def test_fresh_wrapper_per_call(self):
        assert not arc(1).ptr_eq(arc(1))

    def test_borrowed_cow_does_not_copy(self):
        data = [1]
        assert cow_borrowed(data).value is data

    def test_vec_box_order(self):
        boxes = vec_box(1, 2, 3)
        assert all(isinstance(b, Box) for b in boxes)
        assert [b.value for b in boxes] == [1, 2, 3]

    def test_vec_elements_independent(self):
        shared = vec_rc("a", "a")
        assert not shared[0].ptr_eq(shared[1])
        assert vec_arc() == []


class TestUnwrap:
    @pytest.mark.parametrize("name", SCALARS)
    def test_scalar_roundtrip(self, name):
        entry = get_entry(name)
        value = {"payload": [1, 2]}
        assert entry.unwrap(entry.wrap(value)) == value

    @pytest.mark.parametrize("name", SEQUENCES)
    def test_sequence_preserves_order(self, name):
        entry = get_entry(name)
        assert entry.unwrap(entry.wrap(3, 1, 2)) == [3, 1, 2]

    def test_single_layer(self):
        inner = unwrap(arc_mutex(5))
        assert isinstance(inner, Mutex)
        assert unwrap(arc_mutex(5), layers=2) == 5

    def test_shared_must_be_sole_owner(self):
        shared = arc(1)
        shared.clone()
        with pytest.raises(Exception, match="strong handles"):
            unwrap(shared)
