"""Constructor extraction and declaration loading.

Locates the ``new`` constructor on a type declaration and builds
``TypeDeclaration`` records from the three supported inputs: declarative
manifests (YAML or JSON), Python source text, and live classes.  Source
scanning uses the ``ast`` module only -- nothing is imported or executed.
"""

from __future__ import annotations

import ast
import inspect
import json
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import MissingConstructor
from .models import (
    CONSTRUCTOR_NAME,
    AssociatedFunction,
    Constructor,
    TypeDeclaration,
    Visibility,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MARKER_NAME = "shorthand"
_MANIFEST_SUFFIXES = {".yaml", ".yml", ".json"}


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def extract(decl: TypeDeclaration) -> Constructor:
    """Return the first associated function of *decl* named exactly ``new``.

    Parameter types are never inspected; only the arity is carried over
    because the shorthand forwards its arguments opaquely.

    Raises:
        MissingConstructor: If no function named ``new`` is declared.
    """
    for function in decl.functions:
        if function.name == CONSTRUCTOR_NAME:
            return Constructor.from_function(function)
    raise MissingConstructor(
        decl.identifier, f"no associated function named {CONSTRUCTOR_NAME!r}"
    )


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

def parse_manifest(
    data: dict[str, Any], module: Optional[str] = None
) -> list[TypeDeclaration]:
    """Build declarations from a parsed manifest mapping.

    The manifest holds a ``types`` list; a top-level ``module`` applies to
    every entry that does not name its own, and *module* is the fallback
    when the manifest names none.  Entries use ``name`` or ``identifier``
    for the type name.
    """
    default_module = data.get("module") or module
    declarations: list[TypeDeclaration] = []
    for raw in data.get("types") or []:
        entry = dict(raw)
        if "identifier" not in entry and "name" in entry:
            entry["identifier"] = entry.pop("name")
        entry.setdefault("module", default_module)
        declarations.append(TypeDeclaration.model_validate(entry))
    return declarations


def load_declarations(
    path: str | Path, module: Optional[str] = None
) -> list[TypeDeclaration]:
    """Load declarations from a manifest (``.yaml``/``.yml``/``.json``) or a ``.py`` file.

    Python files are scanned with :func:`declarations_from_source`; their
    module path is *module* when given, otherwise the file stem.  For
    manifests *module* only fills in where the manifest names no module.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file type is not supported or the manifest is not
            a mapping.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    suffix = file_path.suffix.lower()

    if suffix == ".py":
        return declarations_from_source(
            raw, module=module or file_path.stem, filename=str(file_path)
        )
    if suffix not in _MANIFEST_SUFFIXES:
        raise ValueError(f"Unsupported declaration file: {file_path}")

    data = json.loads(raw) if suffix == ".json" else yaml.safe_load(raw)
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping with a 'types' list: {file_path}")
    return parse_manifest(data, module)


# ---------------------------------------------------------------------------
# Python source scanning
# ---------------------------------------------------------------------------

def declarations_from_source(
    source: str,
    module: Optional[str] = None,
    filename: str = "<source>",
) -> list[TypeDeclaration]:
    """Scan Python *source* for top-level classes.

    Every class is returned; ``shorthand`` is ``True`` only for classes
    decorated with the ``shorthand`` marker (bare, attribute, or called
    form).  Nested classes are not considered.

    Raises:
        SyntaxError: If *source* does not parse.
    """
    tree = ast.parse(source, filename=filename)
    declarations: list[TypeDeclaration] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        functions = [
            _function_from_ast(item)
            for item in node.body
            if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef))
            and not _is_dunder(item.name)
        ]
        markers = [d for d in node.decorator_list if _is_marker(d)]
        declarations.append(
            TypeDeclaration(
                identifier=node.name,
                functions=functions,
                shorthand=bool(markers),
                module=module,
                wrapper=_marker_wrapper(markers),
            )
        )
    return declarations


def _is_marker(node: ast.expr) -> bool:
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Name):
        return node.id == MARKER_NAME
    if isinstance(node, ast.Attribute):
        return node.attr == MARKER_NAME
    return False


def _marker_wrapper(markers: list[ast.expr]) -> Optional[str]:
    """The literal ``wrapper=`` argument of a called marker, if any."""
    for marker in markers:
        if not isinstance(marker, ast.Call):
            continue
        for kw in marker.keywords:
            if kw.arg == "wrapper" and isinstance(kw.value, ast.Constant):
                return kw.value.value
    return None


def _decorator_names(node: ast.FunctionDef | ast.AsyncFunctionDef) -> set[str]:
    names: set[str] = set()
    for decorator in node.decorator_list:
        if isinstance(decorator, ast.Name):
            names.add(decorator.id)
        elif isinstance(decorator, ast.Attribute):
            names.add(decorator.attr)
    return names


def _function_from_ast(node: ast.FunctionDef | ast.AsyncFunctionDef) -> AssociatedFunction:
    """Positional arity of a method, excluding ``self``/``cls`` unless it is a staticmethod."""
    args = node.args
    if args.vararg is not None:
        arity: Optional[int] = None
    else:
        arity = len(args.posonlyargs) + len(args.args)
        if "staticmethod" not in _decorator_names(node):
            arity = max(arity - 1, 0)
    return AssociatedFunction(
        name=node.name,
        arity=arity,
        visibility=_visibility(node.name),
    )


# ---------------------------------------------------------------------------
# Live classes
# ---------------------------------------------------------------------------

def declaration_from_class(cls: type) -> TypeDeclaration:
    """Describe a live class as a ``TypeDeclaration``.

    Associated functions are taken from the class body in definition order
    (dunder methods excluded).  The module is the class's ``__module__``.
    """
    functions: list[AssociatedFunction] = []
    for name, member in vars(cls).items():
        if _is_dunder(name):
            continue
        if isinstance(member, (staticmethod, classmethod)):
            target = getattr(cls, name)
        elif inspect.isfunction(member):
            target = member
        else:
            continue
        arity = _signature_arity(target)
        if arity is not None and inspect.isfunction(member):
            # plain methods are declared with a leading ``self``
            arity = max(arity - 1, 0)
        functions.append(
            AssociatedFunction(name=name, arity=arity, visibility=_visibility(name))
        )
    return TypeDeclaration(
        identifier=cls.__name__,
        functions=functions,
        module=cls.__module__,
    )


def _signature_arity(func: Any) -> Optional[int]:
    count = 0
    for param in inspect.signature(func).parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _visibility(name: str) -> Visibility:
    return Visibility.PRIVATE if name.startswith("_") else Visibility.PUBLIC
