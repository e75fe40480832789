"""hurry configuration.

Typed configuration for the offline shorthand generator.  Settings use a
Pydantic v2 model so they are validated at construction time and can be
serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_DOCSTRING = "Shorthand constructors generated by hurry. Do not edit by hand."


class GeneratorConfig(BaseModel):
    """Settings for one generation run.

    Instances are usually built once by the CLI (from flags, a saved JSON
    file, or the environment) and passed to ``ShorthandGenerator``.
    """

    output_path: Path = Field(default=Path("shorthands.py"))
    module_docstring: str = Field(default=DEFAULT_DOCSTRING, min_length=1)
    reserved_names: list[str] = Field(
        default_factory=list,
        description="Names already bound in the generated module's namespace",
    )
    template_dir: Optional[Path] = Field(
        default=None, description="Override directory for the Jinja2 templates"
    )
    require_marker: bool = Field(
        default=True,
        description="Only generate for declarations carrying the shorthand marker",
    )

    @field_validator("module_docstring")
    @classmethod
    def _no_triple_quotes(cls, value: str) -> str:
        if '"""' in value:
            raise ValueError("module_docstring must not contain triple quotes")
        return value

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            HURRY_OUTPUT, HURRY_DOCSTRING, HURRY_RESERVED (comma-separated),
            HURRY_TEMPLATE_DIR, HURRY_REQUIRE_MARKER ("0"/"false" disables).
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("HURRY_OUTPUT"):
            kwargs["output_path"] = Path(os.environ["HURRY_OUTPUT"])
        if os.environ.get("HURRY_DOCSTRING"):
            kwargs["module_docstring"] = os.environ["HURRY_DOCSTRING"]
        if os.environ.get("HURRY_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["HURRY_TEMPLATE_DIR"])
        if os.environ.get("HURRY_REQUIRE_MARKER"):
            kwargs["require_marker"] = os.environ["HURRY_REQUIRE_MARKER"].strip().lower() not in (
                "0", "false", "no",
            )

        reserved_str = os.environ.get("HURRY_RESERVED", "")
        kwargs["reserved_names"] = [n.strip() for n in reserved_str.split(",") if n.strip()]
        return cls(**kwargs)
