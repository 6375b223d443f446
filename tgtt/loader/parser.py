# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark-based reader for the declaration subset of Go.

Only what the transpiler needs is kept: the package clause, imports, constant
declarations and type declarations. Function and variable declarations are
dropped by the post-lexer before the parser sees them, so their bodies never
have to be understood.
"""

from __future__ import annotations

import re
from fractions import Fraction
from pathlib import Path
from typing import Iterator, List, Optional

from lark import Lark, Token, Tree

from .ast import (
	ArrayType,
	BasicLit,
	Binary,
	Call,
	ChanType,
	ConstraintTerm,
	ConstSpec,
	Expr,
	FieldDecl,
	FuncType,
	Ident,
	ImportSpec,
	InterfaceType,
	Located,
	MapType,
	PointerType,
	Selector,
	SliceType,
	SourceFile,
	StructType,
	TypeExpr,
	TypeParamDecl,
	TypeRef,
	TypeSpec,
	Unary,
	UnionType,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class ParseError(ValueError):
	"""A construct that lexes and parses but is not valid Go."""

	def __init__(self, message: str, *, loc: Optional[Located] = None) -> None:
		super().__init__(message)
		self.loc = loc


class SemicolonInserter:
	"""
	Go's automatic semicolon rule: a newline becomes `;` when the line's last
	token is an identifier, a literal, one of the keywords `break`,
	`continue`, `fallthrough`, `return`, the operators `++`/`--`, or a
	closing `)`, `]`, `}`. A final `;` is added at end of input under the
	same rule.
	"""

	always_accept = ("NEWLINE", "INCDEC", "OTHER_OP")

	TERMINABLE = {
		"NAME",
		"INT",
		"FLOAT",
		"IMAG",
		"CHAR",
		"STRING",
		"RAW_STRING",
		"INCDEC",
		"RPAR",
		"RSQB",
		"RBRACE",
	}

	def __init__(self, *, at_eof: bool = True) -> None:
		self.at_eof = at_eof

	def process(self, stream: Iterator[Token]) -> Iterator[Token]:
		last: Optional[Token] = None
		pending: Optional[Token] = None
		for token in stream:
			if token.type == "NEWLINE":
				if last is not None and last.type in self.TERMINABLE:
					pending = Token.new_borrow_pos("_SEMI", "\n", token)
					last = pending
				continue
			if pending is not None:
				yield pending
				pending = None
			yield token
			last = token
		if self.at_eof and last is not None and (pending is not None or last.type in self.TERMINABLE):
			yield pending or Token.new_borrow_pos("_SEMI", "", last)


class DeclSkipper:
	"""
	Drop top-level `func` and `var` declarations.

	A declaration starts at the beginning of input or after a `;` at bracket
	depth 0, and a skipped one runs up to the next `;` at depth 0.
	"""

	always_accept = ()

	SKIPPED = {"func", "var"}
	OPEN = {"LPAR", "LSQB", "LBRACE"}
	CLOSE = {"RPAR", "RSQB", "RBRACE"}

	def process(self, stream: Iterator[Token]) -> Iterator[Token]:
		depth = 0
		at_decl_start = True
		skipping = False
		for token in stream:
			ttype = token.type
			if ttype in self.OPEN:
				depth += 1
			elif ttype in self.CLOSE:
				depth = max(0, depth - 1)
			if skipping:
				if ttype == "_SEMI" and depth == 0:
					skipping = False
					at_decl_start = True
				continue
			if at_decl_start and depth == 0 and token.value in self.SKIPPED:
				skipping = True
				continue
			yield token
			at_decl_start = ttype == "_SEMI" and depth == 0


class GoPostLex:
	"""Combined post-lexer: semicolon insertion, then declaration skipping."""

	always_accept = SemicolonInserter.always_accept

	def __init__(self) -> None:
		self._semicolons = SemicolonInserter(at_eof=True)
		self._skipper = DeclSkipper()

	def process(self, stream):
		return self._skipper.process(self._semicolons.process(stream))


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=GoPostLex(),
)

_FRAGMENT_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start=["expr", "type_expr"],
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=SemicolonInserter(at_eof=False),
)


def parse_source(source: str, *, path: Optional[str] = None) -> SourceFile:
	"""
	Parse one Go source file.

	Syntax errors surface as lark `UnexpectedInput`; well-formed but invalid
	declarations raise `ParseError`.
	"""
	tree = _PARSER.parse(source)
	parsed = _build_source_file(tree)
	parsed.path = path
	return parsed


def parse_expr(source: str) -> Expr:
	"""Parse a standalone constant expression."""
	return _build_expr(_unwrap(_FRAGMENT_PARSER.parse(source, start="expr"), "expr"))


def parse_type_expr(source: str) -> TypeExpr:
	"""Parse a standalone type expression such as `map[string]*pkg.T`."""
	return _build_type_expr(_unwrap(_FRAGMENT_PARSER.parse(source, start="type_expr"), "type_expr"))


def _unwrap(tree: Tree, name: str) -> Tree:
	while isinstance(tree, Tree) and _name(tree) == name and len(tree.children) == 1:
		tree = tree.children[0]
	return tree


# ---- helpers -----------------------------------------------------------------


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _loc(node: Tree | Token) -> Located:
	if isinstance(node, Token):
		return Located(line=node.line or 0, column=node.column or 0)
	meta = node.meta
	return Located(line=getattr(meta, "line", 0), column=getattr(meta, "column", 0))


def _subtrees(tree: Tree, name: Optional[str] = None) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and (name is None or _name(c) == name)]


def _tokens(tree: Tree, ttype: Optional[str] = None) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and (ttype is None or c.type == ttype)]


def _find(tree: Tree, name: str) -> Optional[Tree]:
	return next(iter(_subtrees(tree, name)), None)


# ---- literals ----------------------------------------------------------------

_ESCAPE_RE = re.compile(
	r"\\(?:([abfnrtv\\'\"])|([0-7]{3})|x([0-9a-fA-F]{2})|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8}))"
)
_SIMPLE_ESCAPES = {
	"a": "\a",
	"b": "\b",
	"f": "\f",
	"n": "\n",
	"r": "\r",
	"t": "\t",
	"v": "\v",
	"\\": "\\",
	"'": "'",
	'"': '"',
}


def _decode_escapes(body: str) -> bytes:
	"""
	Decode Go escapes to bytes. `\\ooo` and `\\xhh` are raw bytes, `\\u` and
	`\\U` are code points encoded as UTF-8.
	"""
	out = bytearray()
	pos = 0
	for m in _ESCAPE_RE.finditer(body):
		out += body[pos : m.start()].encode("utf-8")
		simple, octal, hex_byte, u4, u8 = m.groups()
		if simple:
			out += _SIMPLE_ESCAPES[simple].encode("utf-8")
		elif octal:
			value = int(octal, 8)
			if value > 0xFF:
				raise ParseError(f"octal escape value {value} > 255")
			out.append(value)
		elif hex_byte:
			out.append(int(hex_byte, 16))
		else:
			out += chr(int(u4 or u8, 16)).encode("utf-8")
		pos = m.end()
	out += body[pos:].encode("utf-8")
	return bytes(out)


def unquote(quoted: str) -> str:
	"""
	Go's `strconv.Unquote` for a double-quoted literal. Raises ParseError on
	a malformed literal or an escape Go does not accept there.
	"""
	if len(quoted) < 2 or quoted[0] != '"' or quoted[-1] != '"':
		raise ParseError(f"not a quoted string: {quoted!r}")
	body = quoted[1:-1]
	for m in _ESCAPE_RE.finditer(body):
		if m.group(1) == "'":
			raise ParseError("invalid escape \\' in string")
	rest = _ESCAPE_RE.sub("", body)
	if "\\" in rest or '"' in rest or "\n" in rest:
		raise ParseError(f"malformed string literal {quoted!r}")
	return _decode_escapes(body).decode("utf-8", errors="replace")


def _decode_string_token(tok: Token) -> str:
	if tok.type == "RAW_STRING":
		return tok.value[1:-1].replace("\r", "")
	return _decode_escapes(tok.value[1:-1]).decode("utf-8", errors="replace")


def _decode_char_token(tok: Token) -> int:
	body = tok.value[1:-1]
	m = _ESCAPE_RE.fullmatch(body)
	if m is not None:
		simple, octal, hex_byte, u4, u8 = m.groups()
		if simple:
			return ord(_SIMPLE_ESCAPES[simple])
		if octal:
			return int(octal, 8)
		if hex_byte:
			return int(hex_byte, 16)
		return int(u4 or u8, 16)
	if len(body) != 1:
		raise ParseError(f"invalid rune literal {tok.value}", loc=_loc(tok))
	return ord(body)


def _parse_int(text: str) -> int:
	text = text.replace("_", "")
	if len(text) > 1 and text[0] == "0" and text[1].isdigit():
		# Legacy octal: 0755.
		return int(text, 8)
	return int(text, 0)


def _build_string_lit(tree: Tree) -> str:
	return _decode_string_token(_tokens(tree)[0])


# ---- declarations ------------------------------------------------------------


def _build_source_file(tree: Tree) -> SourceFile:
	package = _tokens(_find(tree, "package_clause"))[0].value
	imports: List[ImportSpec] = []
	consts: List[ConstSpec] = []
	types: List[TypeSpec] = []
	for child in _subtrees(tree):
		kind = _name(child)
		if kind == "import_decl":
			imports.extend(_build_import_spec(spec) for spec in _subtrees(child, "import_spec"))
		elif kind == "const_decl":
			consts.extend(_build_const_decl(child))
		elif kind == "type_decl":
			types.extend(_build_type_spec(spec) for spec in _subtrees(child))
	return SourceFile(package=package, imports=imports, consts=consts, types=types)


def _build_import_spec(tree: Tree) -> ImportSpec:
	alias_node = _find(tree, "import_alias")
	alias = _tokens(alias_node)[0].value if alias_node is not None else None
	path = _build_string_lit(_find(tree, "string_lit"))
	return ImportSpec(loc=_loc(tree), path=path, alias=alias)


def _build_const_decl(tree: Tree) -> List[ConstSpec]:
	"""
	Build a const group, expanding implicit repetition: a spec without values
	reuses the type and expressions of the previous spec in the group.
	"""
	specs: List[ConstSpec] = []
	prev_type: Optional[TypeExpr] = None
	prev_values: List[Expr] = []
	for iota, node in enumerate(_subtrees(tree, "const_spec")):
		loc = _loc(node)
		names = [t.value for t in _tokens(_find(node, "ident_list"))]
		expr_list = _find(node, "expr_list")
		type_nodes = [c for c in _subtrees(node) if _name(c) not in ("ident_list", "expr_list")]
		if expr_list is None:
			if type_nodes:
				raise ParseError("const declaration with a type must have values", loc=loc)
			if not prev_values:
				raise ParseError(f"missing init expr for const declaration of {names[0]}", loc=loc)
			type_expr, values = prev_type, prev_values
		else:
			type_expr = _build_type_expr(type_nodes[0]) if type_nodes else None
			values = [_build_expr(e) for e in expr_list.children if isinstance(e, Tree)]
			prev_type, prev_values = type_expr, values
		if len(values) != len(names):
			raise ParseError(
				f"const declaration of {', '.join(names)}: {len(names)} names but {len(values)} values",
				loc=loc,
			)
		specs.append(ConstSpec(loc=loc, names=names, type_expr=type_expr, values=values, iota=iota))
	return specs


def _build_type_spec(tree: Tree) -> TypeSpec:
	name_tok = _tokens(tree, "NAME")[0]
	params_node = _find(tree, "type_params")
	type_params = _build_type_params(params_node) if params_node is not None else []
	rhs = [c for c in tree.children if isinstance(c, Tree) and _name(c) != "type_params"]
	return TypeSpec(
		loc=_loc(name_tok),
		name=name_tok.value,
		type_params=type_params,
		type_expr=_build_type_expr(rhs[0]),
		alias=_name(tree) == "alias_def",
	)


def _build_type_params(tree: Tree) -> List[TypeParamDecl]:
	out: List[TypeParamDecl] = []
	for decl in _subtrees(tree, "type_param_decl"):
		names = [t.value for t in _tokens(_find(decl, "ident_list"))]
		out.append(TypeParamDecl(names=names, constraint=_build_constraint(_find(decl, "constraint"))))
	return out


def _build_constraint(tree: Tree) -> TypeExpr:
	terms: List[ConstraintTerm] = []
	for term in _subtrees(tree, "constraint_term"):
		tilde = bool(_tokens(term, "TILDE"))
		terms.append(ConstraintTerm(tilde=tilde, type_expr=_build_type_expr(_subtrees(term)[0])))
	if len(terms) == 1 and not terms[0].tilde:
		return terms[0].type_expr
	return UnionType(loc=_loc(tree), terms=terms)


# ---- types -------------------------------------------------------------------


def _build_type_expr(node: Tree) -> TypeExpr:
	kind = _name(node)
	loc = _loc(node)
	if kind == "type_name":
		pkg, name = _build_qualified_ident(_find(node, "qualified_ident"))
		args_node = _find(node, "type_args")
		args = [_build_type_expr(a) for a in _subtrees(args_node)] if args_node is not None else []
		return TypeRef(loc=loc, name=name, package=pkg, args=args)
	if kind == "pointer_type":
		return PointerType(loc=loc, elem=_build_type_expr(_subtrees(node)[0]))
	if kind == "array_type":
		length, elem = _subtrees(node)
		return ArrayType(loc=loc, length=_build_expr(length), elem=_build_type_expr(elem))
	if kind == "slice_type":
		return SliceType(loc=loc, elem=_build_type_expr(_subtrees(node)[0]))
	if kind == "map_type":
		key, elem = _subtrees(node)
		return MapType(loc=loc, key=_build_type_expr(key), elem=_build_type_expr(elem))
	if kind in ("chan_both", "chan_send", "chan_recv"):
		direction = {"chan_both": "both", "chan_send": "send", "chan_recv": "recv"}[kind]
		return ChanType(loc=loc, direction=direction, elem=_build_type_expr(_subtrees(node)[0]))
	if kind == "func_type":
		return _build_signature(_find(node, "signature"), loc)
	if kind == "struct_type":
		return StructType(loc=loc, fields=[_build_field(f) for f in _subtrees(node)])
	if kind == "interface_type":
		return _build_interface(node)
	raise ParseError(f"unsupported type expression {kind}", loc=loc)


def _build_qualified_ident(tree: Tree) -> tuple[Optional[str], str]:
	parts = [t.value for t in _tokens(tree, "NAME")]
	if len(parts) == 2:
		return parts[0], parts[1]
	return None, parts[0]


def _build_signature(tree: Tree, loc: Located) -> FuncType:
	children = _subtrees(tree)
	params, variadic = _build_parameters(children[0])
	results: List[TypeExpr] = []
	if len(children) > 1:
		result = children[1]
		if _name(result) == "parameters":
			results, _ = _build_parameters(result)
		else:
			results = [_build_type_expr(result)]
	return FuncType(loc=loc, params=params, results=results, variadic=variadic)


def _build_parameters(tree: Tree) -> tuple[List[TypeExpr], bool]:
	types: List[TypeExpr] = []
	variadic = False
	for param in _subtrees(tree, "param_decl"):
		if _tokens(param, "ELLIPSIS"):
			variadic = True
		types.append(_build_type_expr(_subtrees(param)[-1]))
	return types, variadic


def _build_field(tree: Tree) -> FieldDecl:
	tag_node = _find(tree, "tag")
	tag = _build_string_lit(_find(tag_node, "string_lit")) if tag_node is not None else ""
	if _name(tree) == "named_field":
		names = [t.value for t in _tokens(_find(tree, "ident_list"))]
		type_node = next(c for c in _subtrees(tree) if _name(c) not in ("ident_list", "tag"))
		return FieldDecl(loc=_loc(tree), names=names, type_expr=_build_type_expr(type_node), tag=tag)
	embedded = _find(tree, "embedded_name")
	pkg, name = _build_qualified_ident(_find(embedded, "qualified_ident"))
	if _find(embedded, "type_args") is not None:
		raise ParseError(f"embedded generic instantiation {name}[...] is not supported", loc=_loc(tree))
	type_expr: TypeExpr = TypeRef(loc=_loc(embedded), name=name, package=pkg)
	if _tokens(tree, "STAR"):
		type_expr = PointerType(loc=_loc(tree), elem=type_expr)
	return FieldDecl(loc=_loc(tree), names=[name], type_expr=type_expr, tag=tag, embedded=True)


def _build_interface(tree: Tree) -> InterfaceType:
	embeddeds: List[TypeExpr] = []
	methods: List[str] = []
	for elem in _subtrees(tree):
		if _name(elem) == "method_spec":
			methods.append(_tokens(elem, "NAME")[0].value)
		else:
			embeddeds.append(_build_constraint(elem))
	return InterfaceType(loc=_loc(tree), embeddeds=embeddeds, methods=methods)


# ---- expressions -------------------------------------------------------------

_BINARY_RULES = {"expr", "and_expr", "rel_expr", "add_expr", "mul_expr"}


def _build_expr(node: Tree) -> Expr:
	kind = _name(node)
	loc = _loc(node)
	if kind in _BINARY_RULES:
		left, op, right = node.children
		return Binary(loc=loc, op=_tokens(op)[0].value, left=_build_expr(left), right=_build_expr(right))
	if kind == "unary_expr":
		op, operand = node.children
		return Unary(loc=loc, op=_tokens(op)[0].value, operand=_build_expr(operand))
	if kind == "selector":
		value = _subtrees(node)[0]
		return Selector(loc=loc, value=_build_expr(value), name=_tokens(node, "NAME")[-1].value)
	if kind == "call":
		func, arg = _subtrees(node)
		return Call(loc=loc, func=_build_expr(func), arg=_build_expr(arg))
	if kind == "ident":
		return Ident(loc=loc, name=_tokens(node)[0].value)
	if kind == "int_lit":
		return BasicLit(loc=loc, kind="int", value=_parse_int(_tokens(node)[0].value))
	if kind == "float_lit":
		return BasicLit(loc=loc, kind="float", value=Fraction(_tokens(node)[0].value.replace("_", "")))
	if kind == "imag_lit":
		text = _tokens(node)[0].value.replace("_", "")[:-1]
		return BasicLit(loc=loc, kind="imag", value=complex(0, float(text)))
	if kind == "char_lit":
		return BasicLit(loc=loc, kind="char", value=_decode_char_token(_tokens(node)[0]))
	if kind == "str_lit":
		return BasicLit(loc=loc, kind="string", value=_build_string_lit(_find(node, "string_lit")))
	raise ParseError(f"unsupported expression {kind}", loc=loc)


__all__ = ["ParseError", "GoPostLex", "parse_source", "parse_expr", "parse_type_expr", "unquote"]
