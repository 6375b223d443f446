# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The transpiler: walks the requested units and fills the module graph.

Construction is single-threaded. The walk over each requested unit visits
eligible symbols in (name, file, line, column) order; everything else is
pulled in lazily through the router when first referenced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from tgtt.core.diagnostics import Diagnostic
from tgtt.core.symbols import CompilationUnit, Const, SourceProgram, Symbol, TypeName
from tgtt.core.types_core import Struct

from .const_encoder import encode
from .module import Module, ModuleGraph
from .naming import NameTable
from .router import Router
from .struct_info import normalize
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranspilerOptions:
	"""
	`type_mappings` maps a qualified name to literal TypeScript: bare names
	for symbols of the primary unit and for basic types (`int64`), and
	`<import path>.<Name>` for everything else.
	"""

	type_mappings: Mapping[str, str] = field(default_factory=dict)
	include_unexported: bool = False
	fallback_type: str = "any"


@dataclass(frozen=True)
class UnitSelection:
	"""A requested unit; a non-empty `names` emits exactly those symbols."""

	path: str
	names: FrozenSet[str] = frozenset()

	@classmethod
	def of(cls, path: str, names: Iterable[str] = ()) -> "UnitSelection":
		return cls(path=path, names=frozenset(names))


class Transpiler:
	def __init__(
		self,
		program: SourceProgram,
		primary: UnitSelection,
		secondaries: Sequence[UnitSelection] = (),
		options: Optional[TranspilerOptions] = None,
	) -> None:
		self.program = program
		self.primary = primary
		self.secondaries = list(secondaries)
		self.options = options or TranspilerOptions()
		self.diagnostics: List[Diagnostic] = []
		self.graph = ModuleGraph()
		self.names: Optional[NameTable] = None
		self.router = Router(self)
		self.mapper = TypeMapper(
			self.router,
			overrides=self.options.type_mappings,
			fallback=self.options.fallback_type,
			include_unexported=self.options.include_unexported,
		)
		self._eligible: Dict[str, List[Symbol]] = {}

	def run(self) -> ModuleGraph:
		"""
		Transpile the requested units into a fresh module graph.

		A requested unit that failed to load raises its `UnitLoadError`.
		"""
		requested = [self.primary, *self.secondaries]
		units = [self.program.unit(sel.path) for sel in requested]
		self.names = NameTable.build(self.program, self.primary.path, [sel.path for sel in requested])
		self.graph = ModuleGraph()
		self.diagnostics = []
		self.module_for(self.primary.path)
		for sel, unit in zip(requested, units):
			module = self.module_for(unit.path)
			for sym in self.eligible(unit):
				if self._selected(sym, sel):
					self.transpile_symbol(sym, module)
		logger.debug("transpiled %d module(s)", len(self.graph))
		return self.graph

	# ---- helpers used by the router --------------------------------------

	def module_for(self, path: Optional[str]) -> Module:
		assert self.names is not None and path is not None
		return self.graph.module(self.names.name_of(path), path)

	def qualified_name(self, sym: Symbol) -> str:
		if sym.unit_path is None or sym.unit_path == self.primary.path:
			return sym.name
		return f"{sym.unit_path}.{sym.name}"

	def eligible(self, unit: CompilationUnit) -> List[Symbol]:
		"""Constants with a value and type names, in (name, file, line, column) order."""
		cached = self._eligible.get(unit.path)
		if cached is None:
			cached = [s for s in unit.sorted_symbols() if _is_eligible(s)]
			self._eligible[unit.path] = cached
		return cached

	def transpile_symbol(self, sym: Symbol, module: Module) -> None:
		if not module.reserve(sym.name):
			return
		if isinstance(sym, Const):
			text = self._const(sym, module)
		else:
			assert isinstance(sym, TypeName)
			text = self._type_name(sym, module)
		if text is None:
			module.discard(sym.name)
		else:
			module.define(sym.name, text)

	# ---- definitions -----------------------------------------------------

	def _selected(self, sym: Symbol, sel: UnitSelection) -> bool:
		if sel.names:
			return sym.name in sel.names
		return sym.exported or self.options.include_unexported

	def _const(self, const: Const, module: Module) -> Optional[str]:
		value, ok = encode(const.value)
		if not ok:
			logger.warning("%s: constant value %r has no TypeScript literal; dropped", const.qualified_name(), const.value)
			self.diagnostics.append(
				Diagnostic(
					message=f"constant {const.qualified_name()} dropped: unsupported value {const.value!r}",
					code="unsupported-literal",
					phase="transpile",
					severity="warning",
					span=const.span,
				)
			)
			return None
		named = const.named_type
		if named is not None:
			return f"export const {const.name}: {self.mapper.render(named, module)} = {value}"
		return f"export const {const.name} = {value}"

	def _type_name(self, tn: TypeName, module: Module) -> str:
		params = self.mapper.render_type_params(tn.type_params, module)
		head = f"{tn.name}{params}"
		override = self.options.type_mappings.get(self.qualified_name(tn))
		if override is not None:
			return f"export type {head} = {override}"
		if tn.is_alias:
			return f"export type {head} = {self.mapper.render(tn.rhs, module)}"
		under = tn.underlying
		if isinstance(under, Struct):
			info = normalize(under, self.options.include_unexported)
			body = self.mapper.render_struct(info, module)
			if info.embeds:
				return f"export type {head} = {body}"
			return f"export interface {head} {body}"
		return f"export type {head} = {self.mapper.render(under, module)}"


def _is_eligible(sym: Symbol) -> bool:
	if isinstance(sym, Const):
		return sym.value is not None
	return isinstance(sym, TypeName)


__all__ = ["TranspilerOptions", "UnitSelection", "Transpiler"]
