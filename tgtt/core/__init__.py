"""
tgtt.core: resolved input model shared by the loader and the transpiler.

Modules:
  - span: source positions
  - diagnostics: recoverable problems reported alongside output
  - errors: exception hierarchy
  - types_core: type node variants and basic kinds
  - symbols: constants, type names, compilation units, SourceProgram
  - type_subst: type parameter substitution
"""

__all__ = [
	"span",
	"diagnostics",
	"errors",
	"types_core",
	"symbols",
	"type_subst",
]
