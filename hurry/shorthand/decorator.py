"""The ``shorthand`` class decorator.

Marks a class for shorthand generation and, at import time, binds the
derived function next to it::

    @shorthand
    class MyType:
        def __init__(self, value):
            self.value = value

        @classmethod
        def new(cls, value):
            return cls(value)

    my_type(42).value  # -> 42

The same marker is what the offline generator looks for when it scans
source files.
"""

from __future__ import annotations

import sys
from collections.abc import MutableMapping
from typing import Any, Callable, Optional, TypeVar, Union, overload

from ..catalog import get_entry
from .extractor import declaration_from_class, extract
from .models import TypeDeclaration
from .naming import derive
from .synthesizer import Scope, synthesize

C = TypeVar("C", bound=type)

ScopeLike = Union[Scope, MutableMapping[str, Any]]


@overload
def shorthand(cls: C) -> C: ...


@overload
def shorthand(
    cls: None = None,
    *,
    scope: Optional[ScopeLike] = None,
    wrapper: Optional[str] = None,
) -> Callable[[C], C]: ...


def shorthand(
    cls: Optional[C] = None,
    *,
    scope: Optional[ScopeLike] = None,
    wrapper: Optional[str] = None,
) -> Any:
    """Generate and bind a shorthand constructor for the decorated class.

    Args:
        cls: The class, when used as a bare ``@shorthand``.
        scope: Where to bind the function.  A :class:`Scope`, a plain
            mapping, or ``None`` for the namespace of the class's module.
        wrapper: Optional scalar catalog factory applied to each
            constructed value (e.g. ``"arc_mutex"``).

    Raises:
        InvalidIdentifier, MissingConstructor, NameCollision: At decoration
            time; the scope is left unchanged.
    """

    def apply(target: C) -> C:
        decl = TypeDeclaration.model_validate(
            {**declaration_from_class(target).model_dump(), "wrapper": wrapper}
        )
        constructor = extract(decl)
        name = derive(decl.identifier)
        target_scope = _resolve_scope(target, scope)
        target_scope.check(decl.identifier, name)
        item = synthesize(
            name,
            decl.identifier,
            constructor.arity,
            module=decl.module,
            wrapper=decl.wrapper,
            owner_cls=target,
            wrapper_factory=get_entry(wrapper).factory if wrapper else None,
        )
        target_scope.bind(item)
        target.__shorthand__ = name  # type: ignore[attr-defined]
        return target

    if cls is not None:
        return apply(cls)
    return apply


def _resolve_scope(target: type, scope: Optional[ScopeLike]) -> Scope:
    if isinstance(scope, Scope):
        return scope
    if scope is not None:
        return Scope(scope)
    return Scope(vars(sys.modules[target.__module__]))
