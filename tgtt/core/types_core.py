# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolved Go type nodes.

Every node is a frozen dataclass, so structural identity is plain equality.
`Named` and `Alias` point at their declaring `TypeName` symbol, which compares
by `(unit path, name)` only: a struct whose field refers back to its own named
type therefore compares and hashes without walking the cycle.

The family is closed: the type mapper dispatches over exactly these classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple, Union as _TypingUnion

from .span import Span

if TYPE_CHECKING:
	from .symbols import TypeName


class BasicKind(Enum):
	"""Predeclared Go types. The value is the Go spelling."""

	BOOL = "bool"
	INT = "int"
	INT8 = "int8"
	INT16 = "int16"
	INT32 = "int32"
	INT64 = "int64"
	UINT = "uint"
	UINT8 = "uint8"
	UINT16 = "uint16"
	UINT32 = "uint32"
	UINT64 = "uint64"
	UINTPTR = "uintptr"
	FLOAT32 = "float32"
	FLOAT64 = "float64"
	COMPLEX64 = "complex64"
	COMPLEX128 = "complex128"
	STRING = "string"
	UNSAFE_POINTER = "unsafe.Pointer"
	# Kinds of untyped constants.
	UNTYPED_BOOL = "untyped bool"
	UNTYPED_INT = "untyped int"
	UNTYPED_RUNE = "untyped rune"
	UNTYPED_FLOAT = "untyped float"
	UNTYPED_COMPLEX = "untyped complex"
	UNTYPED_STRING = "untyped string"
	UNTYPED_NIL = "untyped nil"

	@property
	def is_integer(self) -> bool:
		return self in _INTEGER_KINDS

	@property
	def is_float(self) -> bool:
		return self in (BasicKind.FLOAT32, BasicKind.FLOAT64, BasicKind.UNTYPED_FLOAT)

	@property
	def is_complex(self) -> bool:
		return self in (BasicKind.COMPLEX64, BasicKind.COMPLEX128, BasicKind.UNTYPED_COMPLEX)

	@property
	def is_untyped(self) -> bool:
		return self.value.startswith("untyped ")


_INTEGER_KINDS = frozenset(
	{
		BasicKind.INT,
		BasicKind.INT8,
		BasicKind.INT16,
		BasicKind.INT32,
		BasicKind.INT64,
		BasicKind.UINT,
		BasicKind.UINT8,
		BasicKind.UINT16,
		BasicKind.UINT32,
		BasicKind.UINT64,
		BasicKind.UINTPTR,
		BasicKind.UNTYPED_INT,
		BasicKind.UNTYPED_RUNE,
	}
)


@dataclass(frozen=True)
class Basic:
	kind: BasicKind

	@property
	def name(self) -> str:
		return self.kind.value


@dataclass(frozen=True)
class Pointer:
	elem: "TypeNode"


@dataclass(frozen=True)
class Array:
	"""Fixed-size array `[N]T`."""

	elem: "TypeNode"
	length: int


@dataclass(frozen=True)
class Slice:
	elem: "TypeNode"


@dataclass(frozen=True)
class Map:
	key: "TypeNode"
	elem: "TypeNode"


class ChanDir(Enum):
	BOTH = "chan"
	SEND = "chan<-"
	RECV = "<-chan"


@dataclass(frozen=True)
class Chan:
	elem: "TypeNode"
	direction: ChanDir = ChanDir.BOTH


@dataclass(frozen=True)
class Signature:
	params: Tuple["TypeNode", ...] = ()
	results: Tuple["TypeNode", ...] = ()
	variadic: bool = False


@dataclass(frozen=True)
class Field:
	"""
	One struct field as declared.

	`embedded` is True for anonymous fields; their `name` is the embedded
	type's name. `tag` is the raw (unquoted) struct tag.
	"""

	name: str
	type: "TypeNode"
	tag: str = ""
	embedded: bool = False
	exported: bool = True
	span: Span = field(default_factory=Span, compare=False)


@dataclass(frozen=True)
class Struct:
	fields: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class Named:
	"""Reference to a defined type, instantiated with `args` when generic."""

	obj: "TypeName"
	args: Tuple["TypeNode", ...] = ()


@dataclass(frozen=True)
class Alias:
	"""Reference to an alias declaration (`type A = B`)."""

	obj: "TypeName"
	args: Tuple["TypeNode", ...] = ()


@dataclass(frozen=True)
class Interface:
	"""
	Interface type. `embeddeds` holds embedded elements (type names, unions,
	interface literals); `methods` only keeps the method names.
	"""

	embeddeds: Tuple["TypeNode", ...] = ()
	methods: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Term:
	tilde: bool
	type: "TypeNode"


@dataclass(frozen=True)
class Union:
	terms: Tuple[Term, ...] = ()


@dataclass(frozen=True)
class TypeParam:
	"""Reference to a type parameter of the enclosing generic declaration."""

	name: str
	index: int = 0


TypeNode = _TypingUnion[
	Basic,
	Pointer,
	Array,
	Slice,
	Map,
	Chan,
	Signature,
	Struct,
	Named,
	Alias,
	Interface,
	Union,
	TypeParam,
]


BASIC_BY_NAME: dict[str, Basic] = {
	k.value: Basic(k) for k in BasicKind if not k.is_untyped and k is not BasicKind.UNSAFE_POINTER
}
# Predeclared aliases.
BASIC_BY_NAME["byte"] = Basic(BasicKind.UINT8)
BASIC_BY_NAME["rune"] = Basic(BasicKind.INT32)


def identical(a: Optional[TypeNode], b: Optional[TypeNode]) -> bool:
	"""Structural identity of two type nodes."""
	return a == b


def dedupe(nodes: "list[TypeNode]") -> "list[TypeNode]":
	"""Drop structurally identical duplicates, keeping first occurrences."""
	out: list[TypeNode] = []
	for node in nodes:
		if not any(identical(node, seen) for seen in out):
			out.append(node)
	return out


__all__ = [
	"BasicKind",
	"Basic",
	"Pointer",
	"Array",
	"Slice",
	"Map",
	"ChanDir",
	"Chan",
	"Signature",
	"Field",
	"Struct",
	"Named",
	"Alias",
	"Interface",
	"Term",
	"Union",
	"TypeParam",
	"TypeNode",
	"BASIC_BY_NAME",
	"identical",
	"dedupe",
]
