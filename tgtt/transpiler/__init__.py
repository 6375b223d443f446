"""
tgtt.transpiler: resolved Go types to TypeScript modules.

Modules:
  - type_mapper: type nodes to TypeScript type text
  - struct_info: struct fields and `json` tags to properties and embeds
  - const_encoder: constant values to literals
  - naming: unit path to module name assignment
  - router: cross-module references and lazy inclusion
  - transpiler: the walk over the requested units
  - module: output modules and concurrent rendering
  - expr: syntax-only translation of a single type expression
"""

from .expr import ExprError, transpile_expr
from .module import Module, ModuleGraph
from .transpiler import Transpiler, TranspilerOptions, UnitSelection

__all__ = [
	"ExprError",
	"transpile_expr",
	"Module",
	"ModuleGraph",
	"Transpiler",
	"TranspilerOptions",
	"UnitSelection",
]
