# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type nodes to TypeScript type expressions.

`TypeMapper.render` is a pure function of the node except for references to
named types, which go through the router: resolving a reference may
transpile the referenced symbol into its own module and adds an import edge
to the requesting module.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, FrozenSet, List, Mapping, Optional, Sequence

from tgtt.core.symbols import TypeName, TypeParamDef
from tgtt.core.types_core import (
	Alias,
	Array,
	Basic,
	BasicKind,
	Chan,
	Interface,
	Map,
	Named,
	Pointer,
	Signature,
	Slice,
	Struct,
	TypeNode,
	TypeParam,
	Union,
	dedupe,
	identical,
)

from .struct_info import StructInfo, normalize

if TYPE_CHECKING:
	from .module import Module
	from .router import Router

NULLABLE = " | null"


def nullable(text: str) -> str:
	"""Append ` | null` unless `text` already ends with it."""
	if text.endswith(NULLABLE):
		return text
	return text + NULLABLE


def array_of(elem: str) -> str:
	if " | " in elem or " & " in elem:
		return f"({elem})[]"
	return f"{elem}[]"


def record_of(elem: str) -> str:
	return f"{{ [key in string]: {elem} }}"


def struct_body(fields: Sequence[tuple[str, bool, str]], embeds: Sequence[str]) -> str:
	"""
	`{ "A": T; "B"?: U }` followed by ` & E` per embed. An embed that renders
	nullable contributes `Partial<E>` instead.
	"""
	members = [f"{json.dumps(name, ensure_ascii=False)}{'?' if optional else ''}: {text}" for name, optional, text in fields]
	body = "{ " + "; ".join(members) + " }" if members else "{}"
	for embed in embeds:
		if embed.endswith(NULLABLE):
			embed = f"Partial<{embed[: -len(NULLABLE)]}>"
		body += f" & {embed}"
	return body


class TypeMapper:
	def __init__(
		self,
		router: "Router",
		*,
		overrides: Optional[Mapping[str, str]] = None,
		fallback: str = "any",
		include_unexported: bool = False,
	) -> None:
		self.router = router
		self.overrides = dict(overrides or {})
		self.fallback = fallback
		self.include_unexported = include_unexported

	def render(self, node: TypeNode, module: "Module") -> str:
		if isinstance(node, Basic):
			return self._basic(node)
		if isinstance(node, Pointer):
			return nullable(self.render(node.elem, module))
		if isinstance(node, (Array, Slice)):
			return array_of(self.render(node.elem, module))
		if isinstance(node, Map):
			return record_of(self.render(node.elem, module))
		if isinstance(node, Struct):
			return self.render_struct(normalize(node, self.include_unexported), module)
		if isinstance(node, (Named, Alias)):
			return self._reference(node, module)
		if isinstance(node, Interface):
			return self._interface(node, module)
		if isinstance(node, Union):
			return self._join([t.type for t in node.terms], module)
		if isinstance(node, TypeParam):
			return node.name
		if isinstance(node, Chan):
			return f"{self.fallback} /* chan */"
		if isinstance(node, Signature):
			return f"{self.fallback} /* func */"
		raise TypeError(f"unexpected type node {node!r}")

	def render_struct(self, info: StructInfo, module: "Module") -> str:
		fields = [(f.name, f.optional, self.render(f.type, module)) for f in info.fields]
		embeds = [self.render(e, module) for e in info.embeds]
		return struct_body(fields, embeds)

	def render_type_params(self, params: Sequence[TypeParamDef], module: "Module") -> str:
		"""`<T extends C, U extends D>`, or "" for a non-generic declaration."""
		if not params:
			return ""
		parts = []
		for p in params:
			constraint = self.render(p.constraint, module) if p.constraint is not None else self.fallback
			parts.append(f"{p.name} extends {constraint}")
		return "<" + ", ".join(parts) + ">"

	def render_type_args(self, args: Sequence[TypeNode], module: "Module") -> str:
		if not args:
			return ""
		return "<" + ", ".join(self.render(a, module) for a in args) + ">"

	# ---- kinds ---------------------------------------------------------------

	def _basic(self, node: Basic) -> str:
		kind = node.kind
		override = self.overrides.get(kind.value)
		if override is not None:
			return override
		if kind in (BasicKind.BOOL, BasicKind.UNTYPED_BOOL):
			return "boolean"
		if kind in (BasicKind.STRING, BasicKind.UNTYPED_STRING):
			return "string"
		if kind.is_integer or kind.is_float:
			return f"number /* {kind.value} */"
		return f"{self.fallback} /* {kind.value} */"

	def _reference(self, node: Named | Alias, module: "Module") -> str:
		obj = node.obj
		if obj.unit_path is None:
			override = self.overrides.get(obj.name)
			if override is not None:
				return override
			if obj.name == "comparable":
				return "string | number /* comparable */"
			if obj.name == "error":
				return f"{self.fallback} /* error */"
			return obj.name
		return self.router.resolve(obj, module) + self.render_type_args(node.args, module)

	def _interface(self, node: Interface, module: "Module") -> str:
		terms = self._term_set(node)
		if not terms:
			return self.fallback
		return self._join(terms, module)

	def _term_set(self, node: TypeNode, seen: FrozenSet[TypeName] = frozenset()) -> Optional[List[TypeNode]]:
		"""
		The type set an interface element restricts to, or None when the
		element does not restrict it (a method-only interface).
		"""
		if isinstance(node, Union):
			return dedupe([t.type for t in node.terms])
		if isinstance(node, (Named, Alias)) and node.obj.unit_path is not None:
			under = node.obj.underlying
			if isinstance(under, Interface):
				if node.obj in seen:
					# Cyclic embedding adds no restriction.
					return None
				return self._term_set(under, seen | {node.obj})
			return [node]
		if isinstance(node, Interface):
			sets = [s for s in (self._term_set(e, seen) for e in node.embeddeds) if s is not None]
			if not sets:
				return None
			result = sets[0]
			for other in sets[1:]:
				result = [x for x in result if any(identical(x, y) for y in other)]
			return result
		if isinstance(node, Named) and node.obj.name == "error":
			return None
		return [node]

	def _join(self, terms: Sequence[TypeNode], module: "Module") -> str:
		rendered: List[str] = []
		for term in terms:
			text = self.render(term, module)
			if text not in rendered:
				rendered.append(text)
		if not rendered:
			return self.fallback
		return " | ".join(rendered)


__all__ = ["NULLABLE", "TypeMapper", "nullable", "array_of", "record_of", "struct_body"]
