"""Shorthand callable synthesis.

A shorthand is a plain function bound to the derived name that forwards its
positional arguments to ``Owner.new`` and returns the result, constructing a
fresh value on every call.  Two renditions are produced from the same
description: Python source text (for generated modules) and, when the owner
class is available, a live function object.

Every binding goes through a :class:`Scope`, which refuses names that are
already taken before anything is emitted.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable, MutableMapping
from functools import lru_cache
from typing import Any, Callable, Optional

from .errors import InvalidIdentifier, NameCollision
from .models import CONSTRUCTOR_NAME, GeneratedCallable, GeneratedShorthand
from .naming import is_valid_identifier
from .templates import TemplateRenderer


FUNCTION_TEMPLATE = "shorthand_function.py.j2"


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


class Scope:
    """A namespace that generated shorthands are bound into.

    A name counts as taken when it was generated earlier in this scope, is
    listed in *reserved*, or is already a key of *namespace* (for instance a
    module's ``__dict__``).
    """

    def __init__(
        self,
        namespace: MutableMapping[str, Any] | None = None,
        reserved: Iterable[str] = (),
    ) -> None:
        self.namespace: MutableMapping[str, Any] = namespace if namespace is not None else {}
        self.reserved: set[str] = set(reserved)
        self.generated: dict[str, GeneratedCallable] = {}

    def __contains__(self, name: object) -> bool:
        return name in self.generated or name in self.reserved or name in self.namespace

    def __len__(self) -> int:
        return len(self.generated)

    @property
    def names(self) -> list[str]:
        """Generated names in binding order."""
        return list(self.generated)

    def reserve(self, *names: str) -> None:
        self.reserved.update(names)

    def check(self, type_name: str, name: str) -> None:
        """Raise :class:`NameCollision` if *name* is already bound."""
        if name in self:
            raise NameCollision(type_name, name)

    def bind(self, item: GeneratedCallable) -> GeneratedCallable:
        """Introduce *item* into the scope.

        The collision check runs first; on failure the scope is unchanged.
        Live functions are also written into the namespace.
        """
        self.check(item.shorthand.owner, item.name)
        self.generated[item.name] = item
        if item.function is not None:
            self.namespace[item.name] = item.function
        return item


# ---------------------------------------------------------------------------
# Synthesis
# ---------------------------------------------------------------------------


def synthesize(
    shorthand_name: str,
    owner_type: str,
    arity: Optional[int],
    *,
    module: Optional[str] = None,
    wrapper: Optional[str] = None,
    owner_cls: Optional[type] = None,
    wrapper_factory: Optional[Callable[[Any], Any]] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> GeneratedCallable:
    """Produce the callable that forwards *arity* positional arguments to ``owner_type.new``.

    Args:
        shorthand_name: Name the callable is bound to.
        owner_type: Identifier of the type whose constructor is called.
        arity: Exact positional argument count, or ``None`` for variadic.
        module: Import path of the owner, recorded for module rendering.
        wrapper: Catalog factory name applied to the constructed value.
        owner_cls: Live owner class; when given, a function object is built
            too.
        wrapper_factory: Live catalog factory matching *wrapper*.
        renderer: Template renderer to use (defaults to the packaged
            templates).

    Raises:
        InvalidIdentifier: If *shorthand_name* is not a usable identifier.
    """
    if not is_valid_identifier(shorthand_name):
        raise InvalidIdentifier(owner_type, f"shorthand name {shorthand_name!r} is not a valid identifier")

    shorthand = GeneratedShorthand(
        name=shorthand_name,
        owner=owner_type,
        arity=arity,
        module=module,
        wrapper=wrapper,
    )
    source = render_source(shorthand, renderer)

    function = None
    if owner_cls is not None:
        function = build_function(owner_cls, shorthand_name, arity, wrapper_factory)
    return GeneratedCallable(shorthand=shorthand, source=source, function=function)


def render_source(
    shorthand: GeneratedShorthand,
    renderer: Optional[TemplateRenderer] = None,
) -> str:
    """Render the Python source text of a single shorthand function."""
    if shorthand.variadic:
        signature = "*args"
        arguments = "*args"
    elif shorthand.arity:
        signature = ", ".join(shorthand.parameters) + ", /"
        arguments = ", ".join(shorthand.parameters)
    else:
        signature = ""
        arguments = ""

    call = f"{shorthand.owner}.{CONSTRUCTOR_NAME}({arguments})"
    if shorthand.wrapper:
        call = f"{shorthand.wrapper}({call})"

    return (renderer or _default_renderer()).render(
        FUNCTION_TEMPLATE,
        {
            "name": shorthand.name,
            "owner": shorthand.owner,
            "signature": signature,
            "call": call,
        },
    )


def build_function(
    owner_cls: type,
    name: str,
    arity: Optional[int],
    wrapper_factory: Optional[Callable[[Any], Any]] = None,
) -> Callable[..., Any]:
    """Build a live function forwarding to ``owner_cls.new``.

    The constructor is looked up on every call.  Calling with the wrong
    number of positional arguments raises ``TypeError`` before the
    constructor runs.
    """

    def forward(*args: Any) -> Any:
        if arity is not None and len(args) != arity:
            plural = "" if arity == 1 else "s"
            raise TypeError(
                f"{name}() takes {arity} positional argument{plural} but {len(args)} were given"
            )
        value = getattr(owner_cls, CONSTRUCTOR_NAME)(*args)
        if wrapper_factory is not None:
            return wrapper_factory(value)
        return value

    forward.__name__ = name
    forward.__qualname__ = name
    forward.__module__ = owner_cls.__module__
    forward.__doc__ = f"Shorthand for ``{owner_cls.__name__}.{CONSTRUCTOR_NAME}``."
    forward.__signature__ = _signature(arity)  # type: ignore[attr-defined]
    return forward


def _signature(arity: Optional[int]) -> inspect.Signature:
    if arity is None:
        params = [inspect.Parameter("args", inspect.Parameter.VAR_POSITIONAL)]
    else:
        params = [
            inspect.Parameter(f"arg{i}", inspect.Parameter.POSITIONAL_ONLY)
            for i in range(arity)
        ]
    return inspect.Signature(params)


@lru_cache(maxsize=1)
def _default_renderer() -> TemplateRenderer:
    return TemplateRenderer()
