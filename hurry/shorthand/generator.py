"""Offline shorthand module generator.

Takes a sequence of ``TypeDeclaration`` records and renders a Python module
containing one shorthand function per declaration that carries the opt-in
marker.  The generated module's namespace is the scope: every derived name
must be unique within it and must not shadow an imported type or catalog
factory.

Generation is all-or-nothing.  The first failing declaration aborts the run
and nothing is written.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Optional

from ..config import GeneratorConfig
from .extractor import extract
from .models import GeneratedCallable, GenerationResult, TypeDeclaration
from .naming import derive
from .synthesizer import Scope, synthesize
from .templates import TemplateRenderer


MODULE_TEMPLATE = "shorthand_module.py.j2"


class ShorthandGenerator:
    """Drives derivation, extraction and synthesis over a declaration set.

    Quick usage::

        generator = ShorthandGenerator(GeneratorConfig(output_path=Path("shorthands.py")))
        declarations = load_declarations("types.yaml")
        path = await generator.generate(declarations)
    """

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self.config = config or GeneratorConfig()
        self.renderer = TemplateRenderer(self.config.template_dir)

    # -- Public API --------------------------------------------------------

    def run(self, declarations: Iterable[TypeDeclaration]) -> GenerationResult:
        """Synthesize shorthands for every eligible declaration, in order.

        Raises:
            InvalidIdentifier, MissingConstructor, NameCollision: On the first
                declaration that violates a rule.
        """
        selected, skipped = self._select(declarations)
        scope = self.new_scope(selected)
        result = GenerationResult(skipped=skipped)
        for decl in selected:
            result.callables.append(self.process(decl, scope))
        return result

    def process(self, decl: TypeDeclaration, scope: Scope) -> GeneratedCallable:
        """Generate the shorthand for one declaration and bind it in *scope*.

        Every check runs before binding, so a failure leaves *scope*
        untouched.
        """
        constructor = extract(decl)
        name = derive(decl.identifier)
        scope.check(decl.identifier, name)
        item = synthesize(
            name,
            decl.identifier,
            constructor.arity,
            module=decl.module,
            wrapper=decl.wrapper,
            renderer=self.renderer,
        )
        return scope.bind(item)

    def new_scope(self, declarations: Sequence[TypeDeclaration]) -> Scope:
        """Scope for the generated module.

        Pre-bound names are the configured reserved names, every owner type
        the generated functions reference (imported or not), and every catalog
        factory the module imports.
        """
        reserved = set(self.config.reserved_names)
        for decl in declarations:
            reserved.add(decl.identifier)
            if decl.wrapper is not None:
                reserved.add(decl.wrapper)
        return Scope(reserved=reserved)

    def render(self, result: GenerationResult) -> str:
        """Render the module source for a completed generation pass."""
        return self.renderer.render(MODULE_TEMPLATE, self._module_context(result))

    async def generate(
        self,
        declarations: Iterable[TypeDeclaration],
        output_path: str | Path | None = None,
    ) -> Path:
        """Run generation and write the module.

        Args:
            declarations: Type declarations to process.
            output_path: Destination file; defaults to ``config.output_path``.

        Returns:
            Path of the written module.
        """
        result = self.run(declarations)
        return await self.write(result, output_path)

    async def write(
        self,
        result: GenerationResult,
        output_path: str | Path | None = None,
    ) -> Path:
        """Render *result* and write it to *output_path* (or the configured path)."""
        target = Path(output_path) if output_path is not None else self.config.output_path
        return await self.renderer.render_to_file(
            MODULE_TEMPLATE, target, self._module_context(result)
        )

    # -- Internals ---------------------------------------------------------

    def _select(
        self, declarations: Iterable[TypeDeclaration]
    ) -> tuple[list[TypeDeclaration], list[str]]:
        selected: list[TypeDeclaration] = []
        skipped: list[str] = []
        for decl in declarations:
            if self.config.require_marker and not decl.shorthand:
                skipped.append(decl.identifier)
            else:
                selected.append(decl)
        return selected, skipped

    def _module_context(self, result: GenerationResult) -> dict[str, Any]:
        return {
            "docstring": self.config.module_docstring,
            "imports": result.imports(),
            "wrappers": result.wrappers(),
            "names": result.names,
            "sources": [item.source for item in result.callables],
        }
