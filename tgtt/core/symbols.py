# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolved symbols and compilation units.

This is the input contract of the transpiler: an already-resolved graph of
Go packages. Symbols are identified by `(unit_path, name)`; universe symbols
(`error`, `comparable`, ...) have `unit_path=None`.

`TypeName.underlying` is filled in after the object is created so that
declarations can refer to each other (and to themselves) in any order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .errors import UnitLoadError, UnitNotFoundError
from .span import Span
from .types_core import Named, TypeNode

ConstValue = Union[bool, str, int, Fraction, float, complex]


@dataclass(eq=False)
class Symbol:
	name: str
	unit_path: Optional[str]
	span: Span = field(default_factory=Span)

	@property
	def key(self) -> Tuple[Optional[str], str]:
		return (self.unit_path, self.name)

	@property
	def exported(self) -> bool:
		return is_exported(self.name)

	def qualified_name(self) -> str:
		if self.unit_path is None:
			return self.name
		return f"{self.unit_path}.{self.name}"

	def sort_key(self) -> tuple:
		return (self.name, *self.span.sort_key())

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, Symbol):
			return NotImplemented
		return self.key == other.key

	def __hash__(self) -> int:
		return hash(self.key)

	def __repr__(self) -> str:
		return f"{type(self).__name__}({self.qualified_name()!r})"


@dataclass(eq=False)
class TypeParamDef:
	name: str
	index: int
	constraint: Optional[TypeNode] = None


@dataclass(eq=False, repr=False)
class TypeName(Symbol):
	"""
	A `type` declaration.

	For defined types `underlying` is the structural type (never a Named,
	except when the right-hand side lives in a unit that failed to load).
	For aliases `is_alias` is set and `rhs` is the aliased type.
	A stub created for a unit that failed to load has `underlying=None`.
	"""

	underlying: Optional[TypeNode] = None
	type_params: Tuple[TypeParamDef, ...] = ()
	is_alias: bool = False
	rhs: Optional[TypeNode] = None

	@property
	def is_stub(self) -> bool:
		return self.underlying is None and self.rhs is None


@dataclass(eq=False, repr=False)
class Const(Symbol):
	"""
	A constant. `value` is None when the constant expression could not be
	evaluated (for example it refers to a unit that failed to load).
	`type` is a Named for constants of a defined type, a Basic for basic-typed
	constants and None for untyped ones.
	"""

	value: Optional[ConstValue] = None
	type: Optional[TypeNode] = None

	@property
	def named_type(self) -> Optional[Named]:
		if isinstance(self.type, Named):
			return self.type
		return None


def is_exported(name: str) -> bool:
	return bool(name) and name[0].isupper()


@dataclass
class CompilationUnit:
	"""One Go package: its import path, declared name, symbols and imports."""

	path: str
	name: str
	symbols: Dict[str, Symbol] = field(default_factory=dict)
	imports: List[str] = field(default_factory=list)
	files: List[str] = field(default_factory=list)

	def lookup(self, name: str) -> Optional[Symbol]:
		return self.symbols.get(name)

	def sorted_symbols(self) -> List[Symbol]:
		"""Symbols in (name, file, line, column) order."""
		return sorted(self.symbols.values(), key=lambda s: s.sort_key())


@dataclass
class SourceProgram:
	"""
	The resolved input graph.

	`units` holds every loaded unit; `failures` records units that were
	imported but could not be loaded, keyed by import path.
	"""

	units: Dict[str, CompilationUnit] = field(default_factory=dict)
	failures: Dict[str, UnitLoadError] = field(default_factory=dict)

	def unit(self, path: str) -> CompilationUnit:
		if path in self.units:
			return self.units[path]
		if path in self.failures:
			raise self.failures[path]
		raise UnitNotFoundError(f"package {path!r} is not part of the loaded program", path=path)

	def package_name(self, path: str) -> str:
		"""Declared package name, or one derived from the import path."""
		unit = self.units.get(path)
		if unit is not None:
			return unit.name
		return default_package_name(path)

	def reachable(self, roots: List[str]) -> Iterator[str]:
		"""Import paths reachable from `roots` (depth-first, roots included)."""
		seen: set[str] = set()
		stack = list(reversed(roots))
		while stack:
			path = stack.pop()
			if path in seen:
				continue
			seen.add(path)
			yield path
			unit = self.units.get(path)
			if unit is None:
				continue
			for imported in reversed(unit.imports):
				if imported not in seen:
					stack.append(imported)


def default_package_name(path: str) -> str:
	"""
	Guess a package name from an import path: the last segment, skipping a
	`/vN` major-version suffix, reduced to an identifier.
	"""
	segments = [s for s in path.split("/") if s]
	if not segments:
		return "pkg"
	last = segments[-1]
	if len(segments) > 1 and last[:1] == "v" and last[1:].isdigit():
		last = segments[-2]
	for prefix in ("go-", "go."):
		if last.startswith(prefix) and len(last) > len(prefix):
			last = last[len(prefix):]
	name = "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in last)
	if not name or name[0].isdigit():
		name = "_" + name
	return name


# Universe scope. Basic types are resolved to Basic nodes by the loader; these
# are the predeclared names that stay symbolic.
UNIVERSE_ERROR = TypeName(name="error", unit_path=None)
UNIVERSE_COMPARABLE = TypeName(name="comparable", unit_path=None)


__all__ = [
	"ConstValue",
	"Symbol",
	"TypeParamDef",
	"TypeName",
	"Const",
	"is_exported",
	"CompilationUnit",
	"SourceProgram",
	"default_package_name",
	"UNIVERSE_ERROR",
	"UNIVERSE_COMPARABLE",
]
