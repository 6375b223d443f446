"""
tgtt.loader: read Go package sources into a resolved `SourceProgram`.

Modules:
  - grammar.lark / parser: declaration-subset reader (lark)
  - ast: declaration AST
  - resolver: name resolution and constant evaluation for one unit
  - workspace: locating package sources (disk or memory)
  - program: loading a unit and its imports
"""

from .parser import ParseError, parse_expr, parse_source, parse_type_expr
from .program import Loader, load_program
from .workspace import MemoryWorkspace, Workspace

__all__ = [
	"ParseError",
	"parse_source",
	"parse_expr",
	"parse_type_expr",
	"Loader",
	"load_program",
	"Workspace",
	"MemoryWorkspace",
]
