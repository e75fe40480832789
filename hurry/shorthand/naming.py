"""Shorthand name derivation.

Turns an UpperCamelCase type identifier into the lower_snake_case name the
generated shorthand is bound to::

    derive("MyType")     -> "my_type"
    derive("HTTPServer") -> "http_server"
    derive("Vec3D")      -> "vec3_d"
"""

from __future__ import annotations

import keyword
import re

from .errors import InvalidIdentifier


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Last capital of an acronym run that starts a new word: "HTTPServer" -> "HTTP_Server"
_ACRONYM_BOUNDARY = re.compile(r"([A-Z])([A-Z][a-z])")
# Lowercase letter or digit followed by a capital: "MyType" -> "My_Type"
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def is_valid_identifier(name: str) -> bool:
    """Return ``True`` if *name* matches the identifier grammar and is not a keyword."""
    return bool(_IDENTIFIER_PATTERN.fullmatch(name)) and not keyword.iskeyword(name)


def derive(identifier: str) -> str:
    """Derive the shorthand identifier for a type name.

    An underscore is inserted before every uppercase letter that directly
    follows a lowercase letter or digit.  Runs of capitals (acronyms) stay
    together, except that the final capital of a run is split off when a
    lowercase letter follows it.  The result is lowercased.

    Raises:
        InvalidIdentifier: If *identifier* is empty, contains characters
            outside ``[A-Za-z0-9_]``, starts with a digit, or derives to a
            reserved keyword.
    """
    if not identifier or not _IDENTIFIER_PATTERN.fullmatch(identifier):
        raise InvalidIdentifier(
            identifier or "<empty>",
            "type name must match [A-Za-z_][A-Za-z0-9_]*",
        )

    s1 = _ACRONYM_BOUNDARY.sub(r"\1_\2", identifier)
    s2 = _WORD_BOUNDARY.sub(r"\1_\2", s1)
    derived = s2.lower()

    if keyword.iskeyword(derived):
        raise InvalidIdentifier(
            identifier, f"derived name {derived!r} is a reserved keyword"
        )
    return derived
