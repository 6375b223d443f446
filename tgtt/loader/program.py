# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Building a `SourceProgram` from a workspace.

Units are loaded depth-first: a unit's imports are loaded (or recorded as
failed) before the unit itself is resolved. A failed dependency is not fatal
for its importers: symbols referenced through it become stub `TypeName`s and
constants that depend on it are left without a value.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Protocol, Set, Tuple

from lark.exceptions import UnexpectedInput

from tgtt.core.diagnostics import Diagnostic
from tgtt.core.errors import SourceError, UnitLoadError
from tgtt.core.span import Span
from tgtt.core.symbols import CompilationUnit, SourceProgram, TypeName

from . import ast as A
from .parser import ParseError, parse_source
from .resolver import UnitResolver
from .workspace import SourceList

logger = logging.getLogger(__name__)


class SourceProvider(Protocol):
	def import_path(self, pattern: str) -> str: ...

	def read_unit(self, path: str) -> SourceList: ...


class Loader:
	"""Load units on demand into one shared `SourceProgram`."""

	def __init__(self, workspace: SourceProvider) -> None:
		self.workspace = workspace
		self.program = SourceProgram()
		self._loading: List[str] = []
		self._stubs: Dict[Tuple[str, str], TypeName] = {}

	def stub(self, path: str, name: str) -> TypeName:
		"""The placeholder symbol for `path.name` when `path` failed to load."""
		key = (path, name)
		if key not in self._stubs:
			self._stubs[key] = TypeName(name=name, unit_path=path)
		return self._stubs[key]

	def load(self, path: str) -> CompilationUnit:
		"""Load `path`; a failure is recorded in `program.failures` and re-raised."""
		if path in self.program.units:
			return self.program.units[path]
		if path in self.program.failures:
			raise self.program.failures[path]
		self._loading.append(path)
		try:
			unit = self._load(path)
		except UnitLoadError as err:
			self.program.failures[path] = err
			raise
		finally:
			self._loading.pop()
		self.program.units[path] = unit
		logger.debug("loaded package %s (%s, %d symbol(s))", path, unit.name, len(unit.symbols))
		return unit

	def _load(self, path: str) -> CompilationUnit:
		files = [self._parse(path, name, text) for name, text in self.workspace.read_unit(path)]
		names = {f.package for f in files}
		if len(names) > 1:
			found = ", ".join(f"{f.package} ({f.path})" for f in files)
			raise SourceError(f"found packages {found} in {path}", path=path)
		for dep in _imports(files):
			if dep in self._loading:
				cycle = " -> ".join(self._loading[self._loading.index(dep) :] + [dep])
				raise SourceError(f"import cycle not allowed: {cycle}", path=path)
			try:
				self.load(dep)
			except UnitLoadError as err:
				logger.warning("package %s: dependency %s could not be loaded: %s", path, dep, err)
		return UnitResolver(path, files, self.program, self.stub).resolve()

	def _parse(self, path: str, file: str, text: str) -> A.SourceFile:
		try:
			return parse_source(text, path=file)
		except UnexpectedInput as err:
			span = Span(file=file, line=getattr(err, "line", None), column=getattr(err, "column", None))
			diag = Diagnostic(message=_first_line(str(err)), phase="load", severity="error", span=span)
			raise SourceError(f"package {path}: syntax error", path=path, diagnostics=[diag]) from err
		except ParseError as err:
			span = Span(file=file)
			if err.loc is not None:
				span = Span(file=file, line=err.loc.line, column=err.loc.column)
			diag = Diagnostic(message=str(err), phase="load", severity="error", span=span)
			raise SourceError(f"package {path}: syntax error", path=path, diagnostics=[diag]) from err


def _imports(files: Iterable[A.SourceFile]) -> List[str]:
	seen: Set[str] = set()
	out: List[str] = []
	for f in files:
		for spec in f.imports:
			if spec.path not in seen:
				seen.add(spec.path)
				out.append(spec.path)
	return out


def _first_line(text: str) -> str:
	return text.strip().splitlines()[0] if text.strip() else text


def load_program(workspace: SourceProvider, patterns: Iterable[str]) -> SourceProgram:
	"""
	Load the units named by `patterns` (import paths or `./dir` patterns) and
	everything they import.

	Nothing is raised for units that fail to load: the error is recorded in
	`SourceProgram.failures` and surfaces when the unit is asked for.
	"""
	loader = Loader(workspace)
	for pattern in patterns:
		try:
			path = workspace.import_path(pattern)
		except UnitLoadError as err:
			loader.program.failures[pattern] = err
			continue
		try:
			loader.load(path)
		except UnitLoadError:
			logger.debug("package %s failed to load", path)
	return loader.program


__all__ = ["Loader", "SourceProvider", "load_program"]
