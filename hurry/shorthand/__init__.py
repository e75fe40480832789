"""hurry shorthand engine.

Derives a lower_snake_case name from a type's name and synthesizes a
function bound to it that forwards positional arguments to the type's
``new`` constructor.

Usage::

    from hurry.shorthand import ShorthandGenerator, load_declarations

    generator = ShorthandGenerator()
    result = generator.run(load_declarations("types.yaml"))
    print(generator.render(result))
"""

from hurry.shorthand.decorator import shorthand
from hurry.shorthand.errors import (
    InvalidIdentifier,
    MissingConstructor,
    NameCollision,
    ShorthandError,
)
from hurry.shorthand.extractor import (
    declaration_from_class,
    declarations_from_source,
    extract,
    load_declarations,
)
from hurry.shorthand.generator import ShorthandGenerator
from hurry.shorthand.models import (
    AssociatedFunction,
    Constructor,
    GeneratedCallable,
    GeneratedShorthand,
    GenerationResult,
    TypeDeclaration,
    Visibility,
)
from hurry.shorthand.naming import derive
from hurry.shorthand.synthesizer import Scope, synthesize

__all__ = [
    "AssociatedFunction",
    "Constructor",
    "GeneratedCallable",
    "GeneratedShorthand",
    "GenerationResult",
    "InvalidIdentifier",
    "MissingConstructor",
    "NameCollision",
    "Scope",
    "ShorthandError",
    "ShorthandGenerator",
    "TypeDeclaration",
    "Visibility",
    "declaration_from_class",
    "declarations_from_source",
    "derive",
    "extract",
    "load_declarations",
    "shorthand",
    "synthesize",
]
