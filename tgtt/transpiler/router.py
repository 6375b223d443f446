# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbol references to module-qualified identifiers.

Resolving a reference makes sure the referenced type is defined in the module
that owns it. The first reference transpiles it there, together with the
constants of that type (so enum-like groups travel with their type). The
module's definition table doubles as the recursion guard: a name that is
present, even as the in-progress placeholder, is not transpiled again.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tgtt.core.diagnostics import Diagnostic
from tgtt.core.errors import UnitLoadError
from tgtt.core.symbols import Const, TypeName

if TYPE_CHECKING:
	from .module import Module
	from .transpiler import Transpiler

logger = logging.getLogger(__name__)


class Router:
	def __init__(self, transpiler: "Transpiler") -> None:
		self.transpiler = transpiler

	def resolve(self, obj: TypeName, module: "Module") -> str:
		"""Identifier for `obj` as seen from `module`: bare or `<module>.<name>`."""
		owner = self.transpiler.module_for(obj.unit_path)
		qualified = owner is not module
		if qualified:
			# Recorded before recursing so imports keep first-use order.
			module.add_import(owner)
		if not owner.has(obj.name):
			self._include(obj, owner)
		if qualified:
			return f"{owner.name}.{obj.name}"
		return obj.name

	def _include(self, obj: TypeName, owner: "Module") -> None:
		t = self.transpiler
		try:
			unit = t.program.unit(obj.unit_path)
		except UnitLoadError as err:
			self._unresolved(obj, owner, err)
			return
		for sym in t.eligible(unit):
			if sym.name == obj.name:
				t.transpile_symbol(sym, owner)
			elif isinstance(sym, Const) and self._is_sibling(sym, obj):
				t.transpile_symbol(sym, owner)
		if not owner.has(obj.name):
			# Declared nowhere in a loaded unit: only stubs end up here.
			self._unresolved(obj, owner, None)

	def _is_sibling(self, const: Const, obj: TypeName) -> bool:
		named = const.named_type
		if named is None or named.obj != obj:
			return False
		return const.exported or self.transpiler.options.include_unexported

	def _unresolved(self, obj: TypeName, owner: "Module", err: UnitLoadError | None) -> None:
		t = self.transpiler
		override = t.options.type_mappings.get(t.qualified_name(obj))
		if override is not None:
			owner.reserve(obj.name)
			owner.define(obj.name, f"export type {obj.name} = {override}")
			return
		owner.reserve(obj.name)
		owner.define(obj.name, f"export type {obj.name} = {t.options.fallback_type} /* unresolved: {obj.unit_path} */")
		reason = str(err).splitlines()[0] if err is not None else "symbol not found"
		logger.warning("%s: package %s could not be loaded (%s); using %s", obj.qualified_name(), obj.unit_path, reason, t.options.fallback_type)
		t.diagnostics.append(
			Diagnostic(
				message=f"reference to {obj.qualified_name()} degraded to {t.options.fallback_type}: {reason}",
				code="unresolved-reference",
				phase="transpile",
				severity="warning",
				span=obj.span,
			)
		)


__all__ = ["Router"]
