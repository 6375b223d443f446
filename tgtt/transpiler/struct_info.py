# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Struct field normalization.

Turns a struct's declared fields into what its JSON encoding exposes: named
properties (renamed, optional, or dropped according to the `json` struct tag)
and embedded types whose properties are merged in.

Tag handling follows `encoding/json`:

  json:"-"            field is skipped
  json:"-,"           field is named "-"
  json:"name"         field is renamed
  json:",omitempty"   field is optional (so is `omitzero`)
  json:",inline"      field is embedded even if it is not anonymous

An embedded field only merges when its type is a struct (or a pointer to
one); any other embedded type is a regular property named after the type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tgtt.core.types_core import Alias, Field, Named, Pointer, Struct, TypeNode
from tgtt.loader.parser import ParseError, unquote


@dataclass(frozen=True)
class JsonTag:
	raw: str
	name: str
	options: Tuple[str, ...] = ()

	def has(self, option: str) -> bool:
		return option in self.options


@dataclass(frozen=True)
class FieldInfo:
	name: str
	type: TypeNode
	optional: bool = False


@dataclass
class StructInfo:
	fields: List[FieldInfo] = field(default_factory=list)
	embeds: List[TypeNode] = field(default_factory=list)


def lookup_tag(tag: str, key: str) -> Optional[str]:
	"""
	Value for `key` in a conventional struct tag (`key:"value" key2:"value2"`),
	or None when absent or when the tag is malformed before `key` is reached.
	"""
	while tag:
		tag = tag.lstrip(" ")
		if not tag:
			break
		i = 0
		while i < len(tag) and tag[i] > " " and tag[i] not in ':"' and tag[i] != "\x7f":
			i += 1
		if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
			break
		name = tag[:i]
		tag = tag[i + 1 :]
		i = 1
		while i < len(tag) and tag[i] != '"':
			if tag[i] == "\\":
				i += 1
			i += 1
		if i >= len(tag):
			break
		quoted = tag[: i + 1]
		tag = tag[i + 1 :]
		if name == key:
			try:
				return unquote(quoted)
			except ParseError:
				return None
	return None


def json_tag(tag: str) -> Optional[JsonTag]:
	value = lookup_tag(tag, "json")
	if value is None:
		return None
	name, *options = value.split(",")
	return JsonTag(raw=value, name=name, options=tuple(options))


def field_name(declared: str, tag: str) -> Optional[Tuple[str, bool]]:
	"""
	Output name and optionality for a field declared as `declared` ("" for
	an embedded field). Returns None when the field is skipped; an empty
	output name means the field is merged as an embed.
	"""
	jt = json_tag(tag)
	name = declared
	optional = False
	if jt is not None:
		if jt.raw == "-":
			return None
		if jt.has("inline"):
			name = ""
		elif jt.name:
			name = jt.name
		if name:
			optional = jt.has("omitempty") or jt.has("omitzero")
	if name == "'-'":
		name = "-"
	return name, optional


def _is_struct_like(node: TypeNode) -> bool:
	"""True for struct types, pointers to them and unknown (stub) types."""
	if isinstance(node, Pointer):
		node = node.elem
	if isinstance(node, (Named, Alias)):
		obj = node.obj
		if obj.unit_path is None:
			return False
		if obj.is_stub:
			return True
		under = obj.underlying
		return isinstance(under, Struct)
	return isinstance(node, Struct)


def normalize(struct: Struct, include_unexported: bool = False) -> StructInfo:
	info = StructInfo()
	for f in struct.fields:
		declared = _declared_name(f, include_unexported)
		if declared is None:
			continue
		resolved = field_name(declared, f.tag)
		if resolved is None:
			continue
		name, optional = resolved
		if name:
			info.fields.append(FieldInfo(name=name, type=f.type, optional=optional))
		else:
			info.embeds.append(f.type)
	return info


def _declared_name(f: Field, include_unexported: bool) -> Optional[str]:
	if f.embedded and _is_struct_like(f.type):
		return ""
	if not include_unexported and not f.exported:
		return None
	return f.name


__all__ = [
	"JsonTag",
	"FieldInfo",
	"StructInfo",
	"lookup_tag",
	"json_tag",
	"field_name",
	"normalize",
]
