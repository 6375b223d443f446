# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tgtt: transpile Go type declarations to TypeScript.

Layers:
  core: type nodes, symbols, diagnostics and errors shared by every layer
  loader: Go declaration-subset reader producing a resolved SourceProgram
  transpiler: type mapping, module routing and module rendering
"""

__version__ = "0.4.0"

__all__ = ["core", "loader", "transpiler", "__version__"]
