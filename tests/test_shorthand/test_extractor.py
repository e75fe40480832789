"""Tests for constructor extraction and declaration loading (hurry.shorthand.extractor).

Covers:
- extract(): first ``new`` wins, missing constructor, case sensitivity
- YAML and JSON manifests, default module, validation failures
- ast scanning of Python source (marker forms, arity rules)
- Live class inspection
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from hurry.shorthand.errors import MissingConstructor
from hurry.shorthand.extractor import (
    declaration_from_class,
    declarations_from_source,
    extract,
    load_declarations,
    parse_manifest,
)
from hurry.shorthand.models import (
    AssociatedFunction,
    Constructor,
    TypeDeclaration,
    Visibility,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# extract()
# ---------------------------------------------------------------------------


class TestExtract:
    def test_finds_new(self, widget_declaration: TypeDeclaration):
        constructor = extract(widget_declaration)
        assert isinstance(constructor, Constructor)
        assert constructor.name == "new"
        assert constructor.arity == 1

    def test_missing_constructor(self, no_constructor_declaration: TypeDeclaration):
        with pytest.raises(MissingConstructor) as exc_info:
            extract(no_constructor_declaration)
        assert exc_info.value.type_name == "Gadget"
        assert exc_info.value.rule == "missing-constructor"

    def test_empty_function_list(self):
        with pytest.raises(MissingConstructor):
            extract(TypeDeclaration(identifier="Empty"))

    def test_first_match_wins(self):
        decl = TypeDeclaration(
            identifier="Twice",
            functions=[
                AssociatedFunction(name="new", arity=2),
                AssociatedFunction(name="new", arity=5),
            ],
        )
        assert extract(decl).arity == 2

    def test_variadic_constructor(self):
        decl = TypeDeclaration(
            identifier="Many", functions=[AssociatedFunction(name="new", arity=None)]
        )
        constructor = extract(decl)
        assert constructor.variadic
        assert constructor.arity is None

    def test_private_constructor_still_extracted(self):
        decl = TypeDeclaration(
            identifier="Hidden",
            functions=[AssociatedFunction(name="new", visibility=Visibility.PRIVATE)],
        )
        assert extract(decl).visibility == Visibility.PRIVATE


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


class TestManifests:
    def test_load_yaml(self, sample_manifest: Path):
        declarations = load_declarations(sample_manifest)
        names = [d.identifier for d in declarations]
        assert names == ["Point", "HTTPServer", "Polygon", "Counter", "Internal"]
        assert all(d.module == "shapes" for d in declarations)

    def test_yaml_details(self, sample_manifest: Path):
        by_name = {d.identifier: d for d in load_declarations(sample_manifest)}
        assert extract(by_name["Point"]).arity == 2
        assert extract(by_name["Polygon"]).variadic
        assert by_name["Counter"].wrapper == "arc_mutex"
        assert extract(by_name["Counter"]).arity == 0
        assert by_name["Internal"].shorthand is False

    def test_load_json(self, tmp_path: Path):
        path = tmp_path / "types.json"
        path.write_text(
            json.dumps({"types": [{"identifier": "Widget", "module": "w", "functions": ["new"]}]}),
            encoding="utf-8",
        )
        [decl] = load_declarations(path)
        assert decl.identifier == "Widget"
        assert decl.module == "w"

    def test_fallback_module_only_fills_gaps(self):
        declarations = parse_manifest(
            {"types": [{"name": "A", "functions": ["new"]}, {"name": "B", "module": "own", "functions": ["new"]}]},
            "fallback",
        )
        assert [d.module for d in declarations] == ["fallback", "own"]
        [decl] = parse_manifest({"module": "manifest", "types": [{"name": "C", "functions": ["new"]}]}, "fallback")
        assert decl.module == "manifest"

    def test_entry_module_overrides_default(self):
        [decl] = parse_manifest(
            {"module": "default", "types": [{"name": "A", "module": "own", "functions": ["new"]}]}
        )
        assert decl.module == "own"

    def test_empty_yaml(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_declarations(path) == []

    def test_non_mapping_manifest(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- Widget\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_declarations(path)

    def test_unsupported_suffix(self, tmp_path: Path):
        path = tmp_path / "types.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported"):
            load_declarations(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_declarations(tmp_path / "nope.yaml")

    def test_negative_arity_rejected(self):
        with pytest.raises(ValidationError):
            parse_manifest({"types": [{"name": "A", "functions": [{"name": "new", "arity": -1}]}]})

    def test_unknown_wrapper_rejected(self):
        with pytest.raises(ValidationError, match="unknown wrapper"):
            parse_manifest({"types": [{"name": "A", "wrapper": "nope", "functions": ["new"]}]})

    def test_sequence_wrapper_rejected(self):
        with pytest.raises(ValidationError, match="sequence"):
            parse_manifest({"types": [{"name": "A", "wrapper": "vec_box", "functions": ["new"]}]})


# ---------------------------------------------------------------------------
# Source scanning
# ---------------------------------------------------------------------------


class TestDeclarationsFromSource:
    def test_sample_module(self, sample_source: Path):
        declarations = load_declarations(sample_source)
        by_name = {d.identifier: d for d in declarations}
        assert set(by_name) == {"Point", "HTTPServer", "Polygon", "Counter", "Internal"}
        assert all(d.module == "shapes" for d in declarations)
        assert by_name["Internal"].shorthand is False
        assert by_name["Counter"].shorthand is True
        assert by_name["Counter"].wrapper == "arc_mutex"
        assert by_name["Point"].wrapper is None

    def test_explicit_module_replaces_stem(self, sample_source: Path):
        declarations = load_declarations(sample_source, module="pkg.shapes")
        assert {d.module for d in declarations} == {"pkg.shapes"}

    def test_arity_rules(self):
        source = textwrap.dedent(
            """
            @shorthand
            class Shape:
                def __init__(self, a):
                    pass

                @classmethod
                def new(cls, a, b, /, c=1):
                    pass

                @staticmethod
                def make(a, b):
                    pass

                def area(self):
                    pass

                def _scale(self, factor):
                    pass
            """
        )
        [decl] = declarations_from_source(source)
        functions = {f.name: f for f in decl.functions}
        assert "__init__" not in functions
        assert functions["new"].arity == 3
        assert functions["make"].arity == 2
        assert functions["area"].arity == 0
        assert functions["_scale"].visibility == Visibility.PRIVATE

    def test_varargs_is_variadic(self):
        source = textwrap.dedent(
            """
            @shorthand
            class Bag:
                @staticmethod
                def new(*items):
                    pass
            """
        )
        [decl] = declarations_from_source(source)
        assert extract(decl).variadic

    @pytest.mark.parametrize(
        "decorator", ["@shorthand", "@hurry.shorthand", "@shorthand(wrapper='rc')"]
    )
    def test_marker_forms(self, decorator: str):
        source = f"{decorator}\nclass Thing:\n    pass\n"
        [decl] = declarations_from_source(source)
        assert decl.shorthand is True

    def test_other_decorators_are_not_markers(self):
        source = "import dataclasses\n@dataclasses.dataclass\nclass Thing:\n    pass\n"
        [decl] = declarations_from_source(source)
        assert decl.shorthand is False

    def test_nested_classes_ignored(self):
        source = "class Outer:\n    class Inner:\n        pass\n"
        assert [d.identifier for d in declarations_from_source(source)] == ["Outer"]

    def test_syntax_error_propagates(self):
        with pytest.raises(SyntaxError):
            declarations_from_source("class :\n")


# ---------------------------------------------------------------------------
# Live classes
# ---------------------------------------------------------------------------


class Sample:
    def __init__(self, a, b):
        self.a, self.b = a, b

    @classmethod
    def new(cls, a, b):
        return cls(a, b)

    @staticmethod
    def pair(x, y, z):
        return (x, y, z)

    def describe(self, verbose):
        return verbose

    def _hidden(self):
        return None


class TestDeclarationFromClass:
    def test_functions_in_order(self):
        decl = declaration_from_class(Sample)
        assert decl.identifier == "Sample"
        assert decl.module == __name__
        assert [f.name for f in decl.functions] == ["new", "pair", "describe", "_hidden"]

    def test_arity(self):
        functions = {f.name: f for f in declaration_from_class(Sample).functions}
        assert functions["new"].arity == 2
        assert functions["pair"].arity == 3
        assert functions["describe"].arity == 1
        assert functions["_hidden"].arity == 0
        assert functions["_hidden"].visibility == Visibility.PRIVATE
