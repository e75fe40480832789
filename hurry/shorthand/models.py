"""Pydantic v2 models for the shorthand generator.

Describes the generation-time inputs (type declarations and their associated
functions) and outputs (generated shorthands).  None of these objects outlive
a single generation pass.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..catalog import CATALOG


CONSTRUCTOR_NAME = "new"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Visibility(str, Enum):
    """Visibility of an associated function."""
    PUBLIC = "public"
    PRIVATE = "private"


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class AssociatedFunction(BaseModel):
    """A function attached to a type declaration."""
    name: str = Field(..., description="Function name, e.g. 'new'")
    arity: Optional[int] = Field(
        default=0, ge=0, description="Positional parameter count; None means variadic"
    )
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="Public or private")

    @property
    def variadic(self) -> bool:
        return self.arity is None


class TypeDeclaration(BaseModel):
    """A type plus the ordered list of its associated functions."""
    identifier: str = Field(..., description="Type name, UpperCamelCase by convention")
    functions: list[AssociatedFunction] = Field(
        default_factory=list, description="Associated functions in declaration order"
    )
    shorthand: bool = Field(
        default=True, description="Opt-in marker: generate a shorthand for this type"
    )
    module: Optional[str] = Field(
        default=None, description="Import path of the module that defines the type"
    )
    wrapper: Optional[str] = Field(
        default=None,
        description="Optional catalog wrapper applied to each constructed value, e.g. 'arc_mutex'",
    )

    @field_validator("functions", mode="before")
    @classmethod
    def _accept_name_shorthand(cls, value: Any) -> Any:
        """Allow ``functions: [new]`` as shorthand for ``[{name: new}]``."""
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value

    @field_validator("wrapper")
    @classmethod
    def _scalar_catalog_wrapper(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        entry = CATALOG.get(value)
        if entry is None:
            raise ValueError(f"unknown wrapper {value!r}; expected one of {sorted(CATALOG)}")
        if entry.is_sequence:
            raise ValueError(f"wrapper {value!r} is a sequence factory; only scalar wrappers apply")
        return value


class Constructor(AssociatedFunction):
    """The associated function singled out by the name ``new``."""

    @classmethod
    def from_function(cls, function: AssociatedFunction) -> "Constructor":
        return cls(**function.model_dump())


# ---------------------------------------------------------------------------
# Generated output
# ---------------------------------------------------------------------------

class GeneratedShorthand(BaseModel):
    """Description of one synthesized shorthand."""
    name: str = Field(..., description="Derived lower_snake_case identifier")
    owner: str = Field(..., description="Identifier of the owning type")
    arity: Optional[int] = Field(default=0, ge=0, description="Forwarded arity; None = variadic")
    module: Optional[str] = Field(default=None, description="Module the owner is imported from")
    wrapper: Optional[str] = Field(default=None, description="Catalog wrapper name, if any")

    @property
    def variadic(self) -> bool:
        return self.arity is None

    @property
    def parameters(self) -> list[str]:
        """Positional parameter names used in the rendered function."""
        if self.arity is None:
            return []
        return [f"arg{i}" for i in range(self.arity)]


class GeneratedCallable(BaseModel):
    """A synthesized callable: its description, source text, and live function."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    shorthand: GeneratedShorthand
    source: str = Field(..., description="Rendered Python source of the function")
    function: Optional[Callable[..., Any]] = Field(
        default=None, description="Bound Python function when built against a live class"
    )

    @property
    def name(self) -> str:
        return self.shorthand.name


class GenerationResult(BaseModel):
    """Everything produced by one generation pass over a declaration set."""
    callables: list[GeneratedCallable] = Field(default_factory=list)
    skipped: list[str] = Field(
        default_factory=list, description="Declarations without the opt-in marker"
    )

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.callables]

    def imports(self) -> dict[str, list[str]]:
        """Group owner types by the module they are imported from."""
        grouped: dict[str, list[str]] = {}
        for item in self.callables:
            module = item.shorthand.module
            if module is None:
                continue
            owners = grouped.setdefault(module, [])
            if item.shorthand.owner not in owners:
                owners.append(item.shorthand.owner)
        return {module: sorted(owners) for module, owners in sorted(grouped.items())}

    def wrappers(self) -> list[str]:
        """Catalog factories referenced by the generated callables."""
        return sorted({c.shorthand.wrapper for c in self.callables if c.shorthand.wrapper})
