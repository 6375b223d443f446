"""Declaration-level AST produced by the Go reader."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Located:
	line: int
	column: int


# ---- constant expressions ----------------------------------------------------


class Expr:
	loc: Located


@dataclass
class BasicLit(Expr):
	"""Literal. `kind` is one of int, float, imag, char, string."""

	loc: Located
	kind: str
	value: object


@dataclass
class Ident(Expr):
	loc: Located
	name: str


@dataclass
class Selector(Expr):
	"""`pkg.Name`."""

	loc: Located
	value: Expr
	name: str


@dataclass
class Unary(Expr):
	loc: Located
	op: str
	operand: Expr


@dataclass
class Binary(Expr):
	loc: Located
	op: str
	left: Expr
	right: Expr


@dataclass
class Call(Expr):
	"""Conversion `T(x)` (the only call form allowed in a constant)."""

	loc: Located
	func: Expr
	arg: Expr


# ---- type expressions --------------------------------------------------------


class TypeExpr:
	loc: Located


@dataclass
class TypeRef(TypeExpr):
	loc: Located
	name: str
	package: Optional[str] = None
	args: List[TypeExpr] = field(default_factory=list)


@dataclass
class PointerType(TypeExpr):
	loc: Located
	elem: TypeExpr


@dataclass
class ArrayType(TypeExpr):
	loc: Located
	length: Expr
	elem: TypeExpr


@dataclass
class SliceType(TypeExpr):
	loc: Located
	elem: TypeExpr


@dataclass
class MapType(TypeExpr):
	loc: Located
	key: TypeExpr
	elem: TypeExpr


@dataclass
class ChanType(TypeExpr):
	loc: Located
	direction: str
	elem: TypeExpr


@dataclass
class FuncType(TypeExpr):
	loc: Located
	params: List[TypeExpr]
	results: List[TypeExpr]
	variadic: bool = False


@dataclass
class FieldDecl:
	"""One struct field line. Embedded fields have a single name."""

	loc: Located
	names: List[str]
	type_expr: TypeExpr
	tag: str = ""
	embedded: bool = False


@dataclass
class StructType(TypeExpr):
	loc: Located
	fields: List[FieldDecl]


@dataclass
class ConstraintTerm:
	tilde: bool
	type_expr: TypeExpr


@dataclass
class UnionType(TypeExpr):
	"""A constraint `~A | B`. A single non-tilde term is unwrapped by the builder."""

	loc: Located
	terms: List[ConstraintTerm]


@dataclass
class InterfaceType(TypeExpr):
	loc: Located
	embeddeds: List[TypeExpr]
	methods: List[str]


# ---- declarations ------------------------------------------------------------


@dataclass
class ImportSpec:
	loc: Located
	path: str
	alias: Optional[str] = None


@dataclass
class ConstSpec:
	"""
	One line of a const declaration, with implicit repetition already
	expanded: `type_expr`/`values` are copied from the previous spec of the
	group when omitted, and `iota` is the spec's index within its group.
	"""

	loc: Located
	names: List[str]
	type_expr: Optional[TypeExpr]
	values: List[Expr]
	iota: int


@dataclass
class TypeParamDecl:
	names: List[str]
	constraint: TypeExpr


@dataclass
class TypeSpec:
	loc: Located
	name: str
	type_params: List[TypeParamDecl]
	type_expr: TypeExpr
	alias: bool = False


@dataclass
class SourceFile:
	package: str
	imports: List[ImportSpec]
	consts: List[ConstSpec]
	types: List[TypeSpec]
	path: Optional[str] = None


__all__ = [
	"Located",
	"Expr",
	"BasicLit",
	"Ident",
	"Selector",
	"Unary",
	"Binary",
	"Call",
	"TypeExpr",
	"TypeRef",
	"PointerType",
	"ArrayType",
	"SliceType",
	"MapType",
	"ChanType",
	"FuncType",
	"FieldDecl",
	"StructType",
	"ConstraintTerm",
	"UnionType",
	"InterfaceType",
	"ImportSpec",
	"ConstSpec",
	"TypeParamDecl",
	"TypeSpec",
	"SourceFile",
]
