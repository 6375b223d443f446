# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Name resolution and constant evaluation for one Go package.

Input is the parsed files of a single unit plus the already-loaded program
(its imports are loaded first). Output is a `CompilationUnit` whose symbols
carry resolved type nodes and evaluated constant values.

Resolution is lazy and memoized per symbol, so declarations may refer to each
other in any order; a symbol that is re-entered while being resolved is a
cycle (`type A B; type B A`, `const X = Y; const Y = X`).

Errors are collected as diagnostics, one per failing declaration, and raised
together as a `SourceError` at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tgtt.core.diagnostics import Diagnostic
from tgtt.core.errors import SourceError
from tgtt.core.span import Span
from tgtt.core.symbols import (
	UNIVERSE_COMPARABLE,
	UNIVERSE_ERROR,
	CompilationUnit,
	Const,
	ConstValue,
	SourceProgram,
	Symbol,
	TypeName,
	TypeParamDef,
	is_exported,
)
from tgtt.core.type_subst import Subst, apply_subst
from tgtt.core.types_core import (
	BASIC_BY_NAME,
	Alias,
	Array,
	Basic,
	BasicKind,
	Chan,
	ChanDir,
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

from . import ast as A

StubFactory = Callable[[str, str], Symbol]


class _ResolveError(Exception):
	def __init__(self, message: str, loc: Optional[A.Located]) -> None:
		super().__init__(message)
		self.loc = loc


@dataclass(frozen=True)
class _FileScope:
	file: Optional[str]
	# Import alias -> import path. Blank and dot imports are not listed.
	imports: Dict[str, str]


@dataclass(frozen=True)
class _Val:
	value: Optional[ConstValue]
	type: TypeNode


_UNTYPED_BOOL = Basic(BasicKind.UNTYPED_BOOL)
_UNTYPED_INT = Basic(BasicKind.UNTYPED_INT)
_UNTYPED_RUNE = Basic(BasicKind.UNTYPED_RUNE)
_UNTYPED_FLOAT = Basic(BasicKind.UNTYPED_FLOAT)
_UNTYPED_COMPLEX = Basic(BasicKind.UNTYPED_COMPLEX)
_UNTYPED_STRING = Basic(BasicKind.UNTYPED_STRING)

_LITERAL_TYPES = {
	"int": _UNTYPED_INT,
	"char": _UNTYPED_RUNE,
	"float": _UNTYPED_FLOAT,
	"imag": _UNTYPED_COMPLEX,
	"string": _UNTYPED_STRING,
}

# Untyped numeric kinds, smallest first: mixing two takes the larger.
_NUMERIC_RANK = {
	BasicKind.UNTYPED_INT: 0,
	BasicKind.UNTYPED_RUNE: 1,
	BasicKind.UNTYPED_FLOAT: 2,
	BasicKind.UNTYPED_COMPLEX: 3,
}

_INT_BITS = {
	BasicKind.INT8: 8,
	BasicKind.INT16: 16,
	BasicKind.INT32: 32,
	BasicKind.INT64: 64,
	BasicKind.INT: 64,
	BasicKind.UINT8: 8,
	BasicKind.UINT16: 16,
	BasicKind.UINT32: 32,
	BasicKind.UINT64: 64,
	BasicKind.UINT: 64,
	BasicKind.UINTPTR: 64,
}
_UNSIGNED = {
	BasicKind.UINT8,
	BasicKind.UINT16,
	BasicKind.UINT32,
	BasicKind.UINT64,
	BasicKind.UINT,
	BasicKind.UINTPTR,
}

_ERROR_UNDERLYING = Interface(methods=("Error",))

_IN_PROGRESS = object()


class UnitResolver:
	"""Resolve the parsed files of one unit into a `CompilationUnit`."""

	def __init__(
		self,
		path: str,
		files: Sequence[A.SourceFile],
		program: SourceProgram,
		stub: StubFactory,
	) -> None:
		self.path = path
		self.files = list(files)
		self.program = program
		self.stub = stub
		self.diagnostics: List[Diagnostic] = []
		self.unit = CompilationUnit(
			path=path,
			name=self.files[0].package if self.files else "",
			files=[f.path or "" for f in self.files],
		)
		self._type_specs: Dict[str, Tuple[A.TypeSpec, _FileScope]] = {}
		self._const_specs: Dict[str, Tuple[A.ConstSpec, int, _FileScope]] = {}
		self._state: Dict[str, object] = {}

	# ---- entry point -----------------------------------------------------

	def resolve(self) -> CompilationUnit:
		self._declare()
		for name in list(self.unit.symbols):
			try:
				self._resolve_symbol(name)
			except _ResolveError as err:
				self._error(str(err), err.loc, self._scope_of(name))
		if self.diagnostics:
			raise SourceError(
				f"package {self.path}: {len(self.diagnostics)} error(s)",
				path=self.path,
				diagnostics=self.diagnostics,
			)
		return self.unit

	# ---- declaration collection ------------------------------------------

	def _declare(self) -> None:
		for source in self.files:
			scope = _FileScope(file=source.path, imports=self._file_imports(source))
			for spec in source.types:
				self._add(TypeName(name=spec.name, unit_path=self.path, span=_span(spec.loc, scope)), scope, spec.loc)
				self._type_specs[spec.name] = (spec, scope)
			for spec in source.consts:
				for index, name in enumerate(spec.names):
					if name == "_":
						continue
					self._add(Const(name=name, unit_path=self.path, span=_span(spec.loc, scope)), scope, spec.loc)
					self._const_specs[name] = (spec, index, scope)

	def _add(self, sym: Symbol, scope: _FileScope, loc: A.Located) -> None:
		if sym.name in self.unit.symbols:
			prev = self.unit.symbols[sym.name]
			self._error(f"{sym.name} redeclared in this block (previous declaration at {prev.span})", loc, scope)
			return
		self.unit.symbols[sym.name] = sym

	def _file_imports(self, source: A.SourceFile) -> Dict[str, str]:
		imports: Dict[str, str] = {}
		for spec in source.imports:
			if spec.path not in self.unit.imports:
				self.unit.imports.append(spec.path)
			alias = spec.alias or self.program.package_name(spec.path)
			if alias in ("_", "."):
				continue
			imports[alias] = spec.path
		return imports

	def _scope_of(self, name: str) -> Optional[_FileScope]:
		if name in self._type_specs:
			return self._type_specs[name][1]
		if name in self._const_specs:
			return self._const_specs[name][2]
		return None

	def _error(self, message: str, loc: Optional[A.Located], scope: Optional[_FileScope]) -> None:
		span = _span(loc, scope)
		self.diagnostics.append(Diagnostic(message=message, phase="load", severity="error", span=span))

	# ---- symbols ---------------------------------------------------------

	def _resolve_symbol(self, name: str) -> Symbol:
		sym = self.unit.symbols[name]
		state = self._state.get(name)
		if state is _IN_PROGRESS:
			loc = self._type_specs[name][0].loc if name in self._type_specs else self._const_specs[name][0].loc
			raise _ResolveError(f"invalid recursive declaration of {name}", loc)
		if state is not None:
			return sym
		self._state[name] = _IN_PROGRESS
		try:
			if isinstance(sym, TypeName):
				self._resolve_type_name(sym)
			elif isinstance(sym, Const):
				self._resolve_const(sym)
		except _ResolveError:
			self._state[name] = "failed"
			raise
		self._state[name] = "done"
		return sym

	def _resolve_type_name(self, tn: TypeName) -> None:
		spec, scope = self._type_specs[tn.name]
		params: Dict[str, TypeNode] = {}
		for decl in spec.type_params:
			for name in decl.names:
				params[name] = TypeParam(name=name, index=len(params))
		defs = []
		for decl in spec.type_params:
			constraint = self._type(decl.constraint, scope, params)
			for name in decl.names:
				defs.append(TypeParamDef(name=name, index=params[name].index, constraint=constraint))
		tn.type_params = tuple(defs)
		rhs = self._type(spec.type_expr, scope, params)
		if spec.alias:
			tn.is_alias = True
			tn.rhs = rhs
			tn.underlying = self._underlying(rhs, spec.loc)
		else:
			tn.underlying = self._underlying(rhs, spec.loc)

	def _underlying(self, node: TypeNode, loc: A.Located) -> TypeNode:
		if isinstance(node, (Named, Alias)):
			obj = node.obj
			if obj.unit_path is None:
				return _ERROR_UNDERLYING if obj is UNIVERSE_ERROR else node
			if obj.unit_path == self.path:
				self._resolve_symbol(obj.name)
			if obj.is_stub:
				return node
			base = obj.rhs if isinstance(node, Alias) else obj.underlying
			if obj.type_params and node.args:
				base = apply_subst(base, Subst({tp.name: arg for tp, arg in zip(obj.type_params, node.args)}))
			if isinstance(node, Alias):
				return self._underlying(base, loc)
			return base
		return node

	# ---- type expressions ------------------------------------------------

	def _type(self, expr: A.TypeExpr, scope: _FileScope, params: Dict[str, TypeNode]) -> TypeNode:
		if isinstance(expr, A.TypeRef):
			args = tuple(self._type(a, scope, params) for a in expr.args)
			return self._type_ref(expr, args, scope, params)
		if isinstance(expr, A.PointerType):
			return Pointer(self._type(expr.elem, scope, params))
		if isinstance(expr, A.SliceType):
			return Slice(self._type(expr.elem, scope, params))
		if isinstance(expr, A.ArrayType):
			length = self._eval(expr.length, scope, iota=None)
			if not isinstance(length.value, int) or isinstance(length.value, bool) or length.value < 0:
				raise _ResolveError("array length must be a non-negative integer constant", expr.loc)
			return Array(self._type(expr.elem, scope, params), length.value)
		if isinstance(expr, A.MapType):
			return Map(self._type(expr.key, scope, params), self._type(expr.elem, scope, params))
		if isinstance(expr, A.ChanType):
			direction = {"both": ChanDir.BOTH, "send": ChanDir.SEND, "recv": ChanDir.RECV}[expr.direction]
			return Chan(self._type(expr.elem, scope, params), direction)
		if isinstance(expr, A.FuncType):
			return Signature(
				tuple(self._type(p, scope, params) for p in expr.params),
				tuple(self._type(r, scope, params) for r in expr.results),
				expr.variadic,
			)
		if isinstance(expr, A.StructType):
			return Struct(tuple(self._fields(expr, scope, params)))
		if isinstance(expr, A.InterfaceType):
			embeddeds = tuple(self._type(e, scope, params) for e in expr.embeddeds)
			# Embedded interfaces are complete before the embedding one.
			for elem in embeddeds:
				self._underlying(elem, expr.loc)
			return Interface(embeddeds, tuple(expr.methods))
		if isinstance(expr, A.UnionType):
			return Union(tuple(Term(t.tilde, self._type(t.type_expr, scope, params)) for t in expr.terms))
		raise _ResolveError(f"unsupported type expression {type(expr).__name__}", getattr(expr, "loc", None))

	def _fields(self, expr: A.StructType, scope: _FileScope, params: Dict[str, TypeNode]) -> List[Field]:
		fields: List[Field] = []
		seen: Dict[str, A.Located] = {}
		for decl in expr.fields:
			ftype = self._type(decl.type_expr, scope, params)
			for name in decl.names:
				if name != "_" and name in seen:
					raise _ResolveError(f"duplicate field {name}", decl.loc)
				seen[name] = decl.loc
				fields.append(
					Field(
						name=name,
						type=ftype,
						tag=decl.tag,
						embedded=decl.embedded,
						exported=is_exported(name),
						span=_span(decl.loc, scope),
					)
				)
		return fields

	def _type_ref(
		self,
		ref: A.TypeRef,
		args: Tuple[TypeNode, ...],
		scope: _FileScope,
		params: Dict[str, TypeNode],
	) -> TypeNode:
		if ref.package is not None:
			sym = self._imported(ref.package, ref.name, scope, ref.loc)
			if isinstance(sym, Const):
				raise _ResolveError(f"{ref.package}.{ref.name} is not a type", ref.loc)
			return self._instantiate(sym, args)
		if ref.name in params:
			return params[ref.name]
		sym = self.unit.lookup(ref.name)
		if sym is not None:
			if isinstance(sym, Const):
				raise _ResolveError(f"{ref.name} is not a type", ref.loc)
			return self._instantiate(sym, args)
		if ref.name in BASIC_BY_NAME:
			return BASIC_BY_NAME[ref.name]
		if ref.name == "error":
			return Named(UNIVERSE_ERROR)
		if ref.name == "comparable":
			return Named(UNIVERSE_COMPARABLE)
		if ref.name == "any":
			return Interface()
		raise _ResolveError(f"undefined: {ref.name}", ref.loc)

	def _instantiate(self, sym: Symbol, args: Tuple[TypeNode, ...]) -> TypeNode:
		assert isinstance(sym, TypeName)
		if sym.unit_path == self.path and sym.name in self._type_specs:
			# Aliasness is known from the declaration; the body may not be resolved yet.
			if self._type_specs[sym.name][0].alias:
				return Alias(sym, args)
			return Named(sym, args)
		if sym.is_alias:
			return Alias(sym, args)
		return Named(sym, args)

	def _imported(self, package: str, name: str, scope: _FileScope, loc: A.Located) -> Symbol:
		path = scope.imports.get(package)
		if path is None:
			raise _ResolveError(f"undefined: {package}", loc)
		unit = self.program.units.get(path)
		if unit is None:
			return self.stub(path, name)
		sym = unit.lookup(name)
		if sym is None or not sym.exported:
			raise _ResolveError(f"undefined: {package}.{name}", loc)
		return sym

	# ---- constants -------------------------------------------------------

	def _resolve_const(self, const: Const) -> None:
		spec, index, scope = self._const_specs[const.name]
		val = self._eval(spec.values[index], scope, iota=spec.iota)
		if spec.type_expr is not None:
			val = self._convert(val, self._type(spec.type_expr, scope, {}), spec.loc)
		const.value = val.value
		if isinstance(val.type, Basic) and val.type.kind.is_untyped:
			const.type = None
		else:
			const.type = val.type

	def _eval(self, expr: A.Expr, scope: _FileScope, iota: Optional[int]) -> _Val:
		if isinstance(expr, A.BasicLit):
			return _Val(expr.value, _LITERAL_TYPES[expr.kind])
		if isinstance(expr, A.Ident):
			return self._eval_ident(expr, scope, iota)
		if isinstance(expr, A.Selector):
			if not isinstance(expr.value, A.Ident):
				raise _ResolveError("invalid constant expression", expr.loc)
			sym = self._imported(expr.value.name, expr.name, scope, expr.loc)
			if isinstance(sym, TypeName) and not sym.is_stub:
				raise _ResolveError(f"{expr.value.name}.{expr.name} is not an expression", expr.loc)
			if not isinstance(sym, Const):
				# Referenced through a unit that failed to load.
				return _Val(None, _UNTYPED_INT)
			return _Val(sym.value, sym.type or _untyped_for(sym.value))
		if isinstance(expr, A.Unary):
			return self._unary(expr, self._eval(expr.operand, scope, iota))
		if isinstance(expr, A.Binary):
			left = self._eval(expr.left, scope, iota)
			right = self._eval(expr.right, scope, iota)
			return self._binary(expr, left, right)
		if isinstance(expr, A.Call):
			return self._call(expr, scope, iota)
		raise _ResolveError("invalid constant expression", getattr(expr, "loc", None))

	def _eval_ident(self, expr: A.Ident, scope: _FileScope, iota: Optional[int]) -> _Val:
		name = expr.name
		sym = self.unit.lookup(name)
		if isinstance(sym, Const):
			self._resolve_symbol(name)
			return _Val(sym.value, sym.type or _untyped_for(sym.value))
		if sym is not None:
			raise _ResolveError(f"{name} is not an expression", expr.loc)
		if name == "iota":
			if iota is None:
				raise _ResolveError("cannot use iota outside constant declaration", expr.loc)
			return _Val(iota, _UNTYPED_INT)
		if name in ("true", "false"):
			return _Val(name == "true", _UNTYPED_BOOL)
		raise _ResolveError(f"undefined: {name}", expr.loc)

	def _call(self, expr: A.Call, scope: _FileScope, iota: Optional[int]) -> _Val:
		func = expr.func
		if isinstance(func, A.Ident) and func.name == "len" and self.unit.lookup("len") is None:
			arg = self._eval(expr.arg, scope, iota)
			if arg.value is None:
				return _Val(None, Basic(BasicKind.INT))
			if not isinstance(arg.value, str):
				raise _ResolveError("invalid argument for len", expr.loc)
			return _Val(len(arg.value.encode("utf-8")), Basic(BasicKind.INT))
		if isinstance(func, A.Ident):
			target = self._type(A.TypeRef(loc=func.loc, name=func.name), scope, {})
		elif isinstance(func, A.Selector) and isinstance(func.value, A.Ident):
			target = self._type(A.TypeRef(loc=func.loc, name=func.name, package=func.value.name), scope, {})
		else:
			raise _ResolveError("invalid constant expression", expr.loc)
		return self._convert(self._eval(expr.arg, scope, iota), target, expr.loc)

	# ---- constant arithmetic ---------------------------------------------

	def _kind_of(self, typ: TypeNode) -> Optional[BasicKind]:
		if isinstance(typ, Basic):
			return typ.kind
		if isinstance(typ, (Named, Alias)):
			under = self._underlying(typ, A.Located(0, 0))
			if isinstance(under, Basic):
				return under.kind
		return None

	def _convert(self, val: _Val, target: TypeNode, loc: A.Located) -> _Val:
		kind = self._kind_of(target)
		value = val.value
		if kind is None:
			if isinstance(target, (Named, Alias)) and target.obj.is_stub:
				return _Val(value, target)
			raise _ResolveError("cannot convert constant to non-basic type", loc)
		if value is None:
			return _Val(None, target)
		if kind in (BasicKind.BOOL, BasicKind.UNTYPED_BOOL):
			if not isinstance(value, bool):
				raise _ResolveError(f"cannot convert {value!r} to bool", loc)
			return _Val(value, target)
		if isinstance(value, bool):
			raise _ResolveError(f"cannot convert {value!r} to {kind.value}", loc)
		if kind in (BasicKind.STRING, BasicKind.UNTYPED_STRING):
			if isinstance(value, int):
				try:
					return _Val(chr(value), target)
				except (ValueError, OverflowError):
					return _Val("\ufffd", target)
			if not isinstance(value, str):
				raise _ResolveError(f"cannot convert {value!r} to string", loc)
			return _Val(value, target)
		if isinstance(value, str):
			raise _ResolveError(f"cannot convert {value!r} to {kind.value}", loc)
		if isinstance(value, complex):
			if kind.is_complex:
				return _Val(value, target)
			if value.imag != 0:
				raise _ResolveError(f"constant {value} truncated to real", loc)
			value = Fraction(value.real)
		if kind.is_integer:
			frac = Fraction(value)
			if frac.denominator != 1:
				raise _ResolveError(f"constant {value} truncated to integer", loc)
			return _Val(int(frac), target)
		if kind.is_float:
			return _Val(Fraction(value), target)
		if kind.is_complex:
			return _Val(complex(value), target)
		raise _ResolveError(f"cannot convert constant to {kind.value}", loc)

	def _unary(self, expr: A.Unary, x: _Val) -> _Val:
		op, value = expr.op, x.value
		if op == "!":
			if value is not None and not isinstance(value, bool):
				raise _ResolveError("operator ! not defined on non-bool constant", expr.loc)
			return _Val(None if value is None else not value, x.type)
		if value is None:
			return x
		if isinstance(value, (bool, str)):
			raise _ResolveError(f"operator {op} not defined on {value!r}", expr.loc)
		if op == "+":
			return x
		if op == "-":
			return _Val(-value, x.type)
		# "^": bitwise complement.
		if not isinstance(value, int):
			raise _ResolveError("operator ^ not defined on non-integer constant", expr.loc)
		kind = self._kind_of(x.type)
		if kind in _UNSIGNED:
			return _Val(~value & ((1 << _INT_BITS[kind]) - 1), x.type)
		return _Val(~value, x.type)

	def _binary(self, expr: A.Binary, x: _Val, y: _Val) -> _Val:
		op = expr.op
		if op in ("<<", ">>"):
			return self._shift(expr, x, y)
		typ = self._match(expr, x, y)
		a, b = x.value, y.value
		if op in ("==", "!=", "<", "<=", ">", ">="):
			if a is None or b is None:
				return _Val(None, _UNTYPED_BOOL)
			return _Val(_compare(op, a, b, expr.loc), _UNTYPED_BOOL)
		if op in ("&&", "||"):
			if a is None or b is None:
				return _Val(None, typ)
			if not isinstance(a, bool) or not isinstance(b, bool):
				raise _ResolveError(f"operator {op} not defined on non-bool constants", expr.loc)
			return _Val(a and b if op == "&&" else a or b, typ)
		if a is None or b is None:
			return _Val(None, typ)
		return _Val(self._arith(expr, a, b, self._kind_of(typ)), typ)

	def _match(self, expr: A.Binary, x: _Val, y: _Val) -> TypeNode:
		xk, yk = self._kind_of(x.type), self._kind_of(y.type)
		x_untyped = isinstance(x.type, Basic) and x.type.kind.is_untyped
		y_untyped = isinstance(y.type, Basic) and y.type.kind.is_untyped
		if not x_untyped and not y_untyped:
			if x.type != y.type:
				raise _ResolveError(f"invalid operation: mismatched types in {expr.op}", expr.loc)
			return x.type
		if not x_untyped:
			return x.type
		if not y_untyped:
			return y.type
		if xk in _NUMERIC_RANK and yk in _NUMERIC_RANK:
			return x.type if _NUMERIC_RANK[xk] >= _NUMERIC_RANK[yk] else y.type
		if xk != yk:
			raise _ResolveError(f"invalid operation: mismatched constant kinds in {expr.op}", expr.loc)
		return x.type

	def _arith(self, expr: A.Binary, a: ConstValue, b: ConstValue, kind: Optional[BasicKind]) -> ConstValue:
		op, loc = expr.op, expr.loc
		if isinstance(a, str) or isinstance(b, str):
			if op == "+" and isinstance(a, str) and isinstance(b, str):
				return a + b
			raise _ResolveError(f"operator {op} not defined on string constants", loc)
		if isinstance(a, bool) or isinstance(b, bool):
			raise _ResolveError(f"operator {op} not defined on bool constants", loc)
		if op in ("/", "%") and b == 0:
			raise _ResolveError("invalid operation: division by zero", loc)
		if kind is not None and kind.is_integer:
			a, b = _as_int(a, loc), _as_int(b, loc)
			if op == "/":
				q = abs(a) // abs(b)
				return q if (a < 0) == (b < 0) else -q
			if op == "%":
				r = abs(a) % abs(b)
				return r if a >= 0 else -r
			result = _INT_OPS[op](a, b) if op in _INT_OPS else None
			if result is None:
				raise _ResolveError(f"unsupported operator {op}", loc)
			return result
		if op in ("%", "&", "|", "^", "&^"):
			raise _ResolveError(f"operator {op} not defined on non-integer constants", loc)
		if (kind is not None and kind.is_complex) or isinstance(a, complex) or isinstance(b, complex):
			a, b = complex(a), complex(b)
		else:
			a, b = Fraction(a), Fraction(b)
		if op == "+":
			return a + b
		if op == "-":
			return a - b
		if op == "*":
			return a * b
		return a / b

	def _shift(self, expr: A.Binary, x: _Val, y: _Val) -> _Val:
		typ = x.type
		if isinstance(typ, Basic) and typ.kind.is_untyped:
			typ = _UNTYPED_INT
		if x.value is None or y.value is None:
			return _Val(None, typ)
		a, n = _as_int(x.value, expr.loc), _as_int(y.value, expr.loc)
		if n < 0:
			raise _ResolveError("invalid shift count", expr.loc)
		if n > 1 << 16:
			raise _ResolveError("shift count too large", expr.loc)
		return _Val(a << n if expr.op == "<<" else a >> n, typ)


_INT_OPS = {
	"+": lambda a, b: a + b,
	"-": lambda a, b: a - b,
	"*": lambda a, b: a * b,
	"&": lambda a, b: a & b,
	"|": lambda a, b: a | b,
	"^": lambda a, b: a ^ b,
	"&^": lambda a, b: a & ~b,
}


def _as_int(value: ConstValue, loc: A.Located) -> int:
	if isinstance(value, bool) or isinstance(value, (str, complex)):
		raise _ResolveError(f"constant {value!r} is not an integer", loc)
	frac = Fraction(value)
	if frac.denominator != 1:
		raise _ResolveError(f"constant {value} truncated to integer", loc)
	return int(frac)


def _compare(op: str, a: ConstValue, b: ConstValue, loc: A.Located) -> bool:
	if op == "==":
		return a == b
	if op == "!=":
		return a != b
	if isinstance(a, (bool, complex)) or isinstance(b, (bool, complex)):
		raise _ResolveError(f"operator {op} not defined on this constant kind", loc)
	if isinstance(a, str) != isinstance(b, str):
		raise _ResolveError(f"invalid operation: mismatched constant kinds in {op}", loc)
	if op == "<":
		return a < b
	if op == "<=":
		return a <= b
	if op == ">":
		return a > b
	return a >= b


def _untyped_for(value: Optional[ConstValue]) -> Basic:
	if isinstance(value, bool):
		return _UNTYPED_BOOL
	if isinstance(value, str):
		return _UNTYPED_STRING
	if isinstance(value, complex):
		return _UNTYPED_COMPLEX
	if isinstance(value, Fraction) or isinstance(value, float):
		return _UNTYPED_FLOAT
	return _UNTYPED_INT


def _span(loc: Optional[A.Located], scope: Optional[_FileScope]) -> Span:
	file = scope.file if scope is not None else None
	if loc is None:
		return Span(file=file)
	return Span(file=file, line=loc.line, column=loc.column)


__all__ = ["UnitResolver", "StubFactory"]
