"""Shared pytest fixtures for the hurry test suite.

Provides reusable fixtures for:
- Paths to the sample manifest and sample source module
- Ready-made type declarations
- A generator writing into a temporary directory
- An importable copy of the sample ``shapes`` module
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from hurry.config import GeneratorConfig
from hurry.shorthand.generator import ShorthandGenerator
from hurry.shorthand.models import AssociatedFunction, TypeDeclaration, Visibility


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_manifest() -> Path:
    """Path to the YAML manifest describing the ``shapes`` module."""
    path = FIXTURES_DIR / "shapes.yaml"
    assert path.exists(), f"Sample manifest fixture not found at {path}"
    return path


@pytest.fixture
def sample_source() -> Path:
    """Path to the ``shapes.py`` fixture module."""
    path = FIXTURES_DIR / "shapes.py"
    assert path.exists(), f"Sample source fixture not found at {path}"
    return path


@pytest.fixture
def shapes_on_path(monkeypatch: pytest.MonkeyPatch):
    """Make the ``shapes`` fixture module importable; yields the module."""
    monkeypatch.syspath_prepend(str(FIXTURES_DIR))
    sys.modules.pop("shapes", None)
    import shapes

    yield shapes
    sys.modules.pop("shapes", None)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@pytest.fixture
def widget_declaration() -> TypeDeclaration:
    """``Widget`` with a one-argument public ``new`` constructor."""
    return TypeDeclaration(
        identifier="Widget",
        functions=[
            AssociatedFunction(name="_validate", arity=1, visibility=Visibility.PRIVATE),
            AssociatedFunction(name="new", arity=1),
        ],
        module="widgets",
    )


@pytest.fixture
def no_constructor_declaration() -> TypeDeclaration:
    """``Gadget`` declares functions but none named ``new``."""
    return TypeDeclaration(
        identifier="Gadget",
        functions=[
            AssociatedFunction(name="build", arity=1),
            AssociatedFunction(name="New", arity=1),
        ],
        module="widgets",
    )


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

@pytest.fixture
def generator(tmp_path: Path) -> ShorthandGenerator:
    """Generator configured to write ``shorthands.py`` under *tmp_path*."""
    return ShorthandGenerator(GeneratorConfig(output_path=tmp_path / "shorthands.py"))
