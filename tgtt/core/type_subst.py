# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Type parameter substitution helpers."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping

from .types_core import (
	Alias,
	Array,
	Chan,
	Field,
	Interface,
	Map,
	Named,
	Pointer,
	Signature,
	Slice,
	Struct,
	Term,
	TypeNode,
	TypeParam,
	Union,
)


@dataclass(frozen=True)
class Subst:
	"""Type parameter name -> type argument, for one generic declaration."""

	args: Mapping[str, TypeNode]


def apply_subst(node: TypeNode, subst: Subst) -> TypeNode:
	"""Apply a substitution to a type node, returning a (possibly new) node."""
	if not subst.args:
		return node
	if isinstance(node, TypeParam):
		return subst.args.get(node.name, node)
	if isinstance(node, Pointer):
		return Pointer(apply_subst(node.elem, subst))
	if isinstance(node, Array):
		return Array(apply_subst(node.elem, subst), node.length)
	if isinstance(node, Slice):
		return Slice(apply_subst(node.elem, subst))
	if isinstance(node, Map):
		return Map(apply_subst(node.key, subst), apply_subst(node.elem, subst))
	if isinstance(node, Chan):
		return Chan(apply_subst(node.elem, subst), node.direction)
	if isinstance(node, Signature):
		return Signature(
			tuple(apply_subst(p, subst) for p in node.params),
			tuple(apply_subst(r, subst) for r in node.results),
			node.variadic,
		)
	if isinstance(node, Struct):
		return Struct(tuple(_subst_field(f, subst) for f in node.fields))
	if isinstance(node, Named):
		if not node.args:
			return node
		return Named(node.obj, tuple(apply_subst(a, subst) for a in node.args))
	if isinstance(node, Alias):
		if not node.args:
			return node
		return Alias(node.obj, tuple(apply_subst(a, subst) for a in node.args))
	if isinstance(node, Interface):
		return Interface(tuple(apply_subst(e, subst) for e in node.embeddeds), node.methods)
	if isinstance(node, Union):
		return Union(tuple(Term(t.tilde, apply_subst(t.type, subst)) for t in node.terms))
	return node


def _subst_field(f: Field, subst: Subst) -> Field:
	return replace(f, type=apply_subst(f.type, subst))


__all__ = ["Subst", "apply_subst"]
