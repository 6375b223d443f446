#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Struct tag parsing and field normalization."""

import pytest

from tgtt.core.symbols import TypeName
from tgtt.core.types_core import Basic, BasicKind, Field, Named, Pointer, Struct
from tgtt.transpiler.struct_info import FieldInfo, field_name, json_tag, lookup_tag, normalize

INT = Basic(BasicKind.INT)
STRING = Basic(BasicKind.STRING)


@pytest.mark.parametrize(
	"tag,key,value",
	[
		('json:"name"', "json", "name"),
		('yaml:"y" json:"j,omitempty"', "json", "j,omitempty"),
		('json:"a\\"b"', "json", 'a"b'),
		('xml:"x"', "json", None),
		('json:"\\x41b"', "json", "Ab"),
		('json:"a\\vb"', "json", "a\vb"),
		("json:\"\\'\"", "json", None),
		('json:"\\q"', "json", None),
		("json:name", "json", None),
		('json:"unterminated', "json", None),
		("", "json", None),
	],
)
def test_lookup_tag(tag, key, value):
	assert lookup_tag(tag, key) == value


def test_json_tag_options():
	jt = json_tag('json:"id,omitempty,string"')
	assert jt.name == "id"
	assert jt.has("omitempty")
	assert jt.has("string")
	assert not jt.has("inline")
	assert json_tag('db:"id"') is None


@pytest.mark.parametrize(
	"declared,tag,expected",
	[
		("Name", "", ("Name", False)),
		("Name", 'json:"name"', ("name", False)),
		("Name", 'json:"-"', None),
		("Name", 'json:"-,"', ("-", False)),
		("Name", 'json:",omitempty"', ("Name", True)),
		("Name", 'json:"n,omitzero"', ("n", True)),
		("Name", 'json:",inline"', ("", False)),
		("Name", "json:\"'-'\"", ("-", False)),
		("", 'json:",omitempty"', ("", False)),
		("", 'json:"base"', ("base", False)),
	],
)
def test_field_name(declared, tag, expected):
	assert field_name(declared, tag) == expected


def test_normalize_merges_struct_embeds_only():
	base = TypeName(name="Base", unit_path="m", underlying=Struct((Field("ID", INT),)))
	ident = TypeName(name="Ident", unit_path="m", underlying=STRING)
	stub = TypeName(name="Time", unit_path="time")
	struct = Struct(
		(
			Field("Base", Named(base), embedded=True),
			Field("Ident", Pointer(Named(ident)), embedded=True),
			Field("Time", Named(stub), embedded=True),
			Field("hidden", INT, exported=False),
			Field("Skip", INT, tag='json:"-"'),
			Field("Opt", STRING, tag='json:"opt,omitempty"'),
			Field("Base", Named(base), tag='json:"nested"'),
		)
	)
	info = normalize(struct)
	assert info.embeds == [Named(base), Named(stub)]
	assert info.fields == [
		FieldInfo("Ident", Pointer(Named(ident))),
		FieldInfo("opt", STRING, optional=True),
		FieldInfo("nested", Named(base)),
	]


def test_normalize_include_unexported():
	struct = Struct((Field("hidden", INT, exported=False), Field("err", Named(TypeName(name="error", unit_path=None)), embedded=True, exported=False)))
	assert [f.name for f in normalize(struct).fields] == []
	assert [f.name for f in normalize(struct, include_unexported=True).fields] == ["hidden", "err"]


def test_embedded_field_with_json_name_becomes_property():
	base = TypeName(name="Base", unit_path="m", underlying=Struct())
	info = normalize(Struct((Field("Base", Named(base), tag='json:"base,omitempty"', embedded=True),)))
	assert info.embeds == []
	assert info.fields == [FieldInfo("base", Named(base), optional=True)]
