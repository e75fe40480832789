"""Exceptions raised by the shorthand generation pass.

Every failure is fatal to the generation unit that triggered it.  Each
exception carries the offending type name and the rule that was violated so
callers (and the CLI) can report them without parsing messages.
"""

from __future__ import annotations


class ShorthandError(Exception):
    """Base class for all generation-time failures."""

    rule: str = "shorthand"

    def __init__(self, type_name: str, message: str) -> None:
        self.type_name = type_name
        super().__init__(f"{type_name}: {message} [{self.rule}]")


class InvalidIdentifier(ShorthandError):
    """The type name (or the name derived from it) is not a valid identifier."""

    rule = "identifier-grammar"


class MissingConstructor(ShorthandError):
    """The type declares no associated function named ``new``."""

    rule = "missing-constructor"


class NameCollision(ShorthandError):
    """The derived shorthand name is already bound in the target scope."""

    rule = "name-collision"

    def __init__(self, type_name: str, name: str) -> None:
        self.name = name
        super().__init__(type_name, f"shorthand name {name!r} is already bound in scope")
