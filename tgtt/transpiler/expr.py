# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Direct translation of a single Go type expression.

This is purely syntactic: identifiers and selectors are copied as written and
nothing is resolved, so `time.Time` stays `time.Time`.
"""

from __future__ import annotations

from typing import List, Tuple

from lark.exceptions import UnexpectedInput

from tgtt.core.errors import TgttError
from tgtt.loader.ast import (
	ArrayType,
	ChanType,
	FuncType,
	InterfaceType,
	MapType,
	PointerType,
	SliceType,
	StructType,
	TypeExpr,
	TypeRef,
	UnionType,
)
from tgtt.loader.parser import ParseError, parse_type_expr

from .struct_info import field_name
from .type_mapper import array_of, nullable, record_of, struct_body


class ExprError(TgttError, ValueError):
	"""The expression is malformed or has no TypeScript form."""


def transpile_expr(source: str, fallback: str = "any") -> str:
	try:
		node = parse_type_expr(source)
	except UnexpectedInput as err:
		raise ExprError(f"invalid type expression {source!r}: {_first_line(err)}") from err
	except ParseError as err:
		raise ExprError(f"invalid type expression {source!r}: {err}") from err
	return _render(node, fallback)


def _first_line(err: Exception) -> str:
	text = str(err).strip()
	return text.splitlines()[0] if text else type(err).__name__


def _render(node: TypeExpr, fallback: str) -> str:
	if isinstance(node, TypeRef):
		text = f"{node.package}.{node.name}" if node.package else node.name
		if node.args:
			text += "<" + ", ".join(_render(a, fallback) for a in node.args) + ">"
		return text
	if isinstance(node, PointerType):
		return nullable(_render(node.elem, fallback))
	if isinstance(node, (ArrayType, SliceType)):
		return array_of(_render(node.elem, fallback))
	if isinstance(node, MapType):
		return record_of(_render(node.elem, fallback))
	if isinstance(node, StructType):
		return _struct(node, fallback)
	if isinstance(node, InterfaceType):
		return fallback
	if isinstance(node, FuncType):
		raise ExprError("func types have no TypeScript form")
	if isinstance(node, ChanType):
		raise ExprError("chan types have no TypeScript form")
	if isinstance(node, UnionType):
		raise ExprError("constraint unions are only valid in interfaces")
	raise ExprError(f"unsupported type expression {type(node).__name__}")


def _struct(node: StructType, fallback: str) -> str:
	fields: List[Tuple[str, bool, str]] = []
	embeds: List[str] = []
	for decl in node.fields:
		text = _render(decl.type_expr, fallback)
		names = [""] if decl.embedded else [n for n in decl.names if n[:1].isupper()]
		for declared in names:
			resolved = field_name(declared, decl.tag)
			if resolved is None:
				continue
			name, optional = resolved
			if name:
				fields.append((name, optional, text))
			else:
				embeds.append(text)
	return struct_body(fields, embeds)


__all__ = ["ExprError", "transpile_expr"]
