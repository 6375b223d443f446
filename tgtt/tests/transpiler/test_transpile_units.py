#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""End to end: in-memory Go packages to rendered TypeScript modules."""

from __future__ import annotations

import pytest

from tgtt.core.errors import UnitNotFoundError
from tgtt.core.symbols import CompilationUnit, SourceProgram, TypeName, TypeParamDef
from tgtt.core.types_core import Field, Interface, Named, Pointer, Struct, TypeParam
from tgtt.tests.support import PRIMARY, generate, module_text, run
from tgtt.transpiler import Transpiler, UnitSelection


def test_self_referencing_struct():
	out = generate({PRIMARY: "package m\n\ntype Pair struct {\n\tA int\n\tB *Pair\n}\n"})
	assert out == {
		"index": module_text(PRIMARY, 'export interface Pair { "A": number /* int */; "B": Pair | null }'),
	}


def test_running_twice_gives_the_same_output():
	t, first = run({PRIMARY: "package m\ntype A struct{ B *B }\ntype B struct{ A []A }\n"})
	second = {name: data.decode() for name, data in t.run().generate().items()}
	assert first == second


def test_mutually_referencing_types():
	out = generate({PRIMARY: "package m\ntype A struct{ B *B }\ntype B struct{ A []A }\n"})
	assert out["index"] == module_text(
		PRIMARY,
		'export interface A { "B": B | null }',
		'export interface B { "A": A[] }',
	)


def test_cross_package_reference_adds_import():
	out = generate(
		{
			PRIMARY: """package m

import "example.com/geo"

type Shape struct {
	Center geo.Point `json:"center"`
	Tags   []string `json:"tags,omitempty"`
}
""",
			"example.com/geo": "package geo\n\ntype Point struct {\n\tX, Y float64\n}\n\ntype Unused int\n",
		}
	)
	assert out == {
		"geo": module_text(
			"example.com/geo",
			'export interface Point { "X": number /* float64 */; "Y": number /* float64 */ }',
		),
		"index": module_text(
			PRIMARY,
			'export interface Shape { "center": geo.Point; "tags"?: string[] }',
			imports=["geo"],
		),
	}


def test_constants_travel_with_their_type():
	out = generate(
		{
			PRIMARY: 'package m\n\nimport "example.com/color"\n\ntype Pen struct {\n\tInk color.Color\n}\n',
			"example.com/color": """package color

type Color int

const (
	Red Color = iota
	Green
	Blue
	hidden
)

const Unrelated = 5
""",
		}
	)
	assert out["color"] == module_text(
		"example.com/color",
		"export const Blue: Color = 2",
		"export type Color = number /* int */",
		"export const Green: Color = 1",
		"export const Red: Color = 0",
	)
	assert out["index"] == module_text(PRIMARY, 'export interface Pen { "Ink": color.Color }', imports=["color"])


def test_embedded_structs_become_intersections():
	out = generate(
		{
			PRIMARY: """package m

type Base struct {
	ID int `json:"id"`
}

type Named struct {
	Base
	Name string `json:"name"`
}

type Opt struct {
	*Base
	Extra string `json:"extra,omitempty"`
}
"""
		}
	)
	assert out["index"] == module_text(
		PRIMARY,
		'export interface Base { "id": number /* int */ }',
		'export type Named = { "name": string } & Base',
		'export type Opt = { "extra"?: string } & Partial<Base>',
	)


def test_json_tags():
	out = generate(
		{
			PRIMARY: """package m

type T struct {
	Dash     string  `json:"-,"`
	Renamed  int     `json:"renamed"`
	Opt      *string `json:",omitempty"`
	Plain    bool
	Skipped  int `json:"-"`
	internal int
}
"""
		}
	)
	assert out["index"] == module_text(
		PRIMARY,
		'export interface T { "-": string; "renamed": number /* int */; "Opt"?: string | null; "Plain": boolean }',
	)


def test_generics_and_constraints():
	out = generate(
		{
			PRIMARY: """package m

type Box[T any] struct {
	Value T `json:"value"`
}

type Holder[T Num] struct {
	Items []T
}

type Num interface {
	int | float64
}

type IntBox = Box[int]
"""
		}
	)
	assert out["index"] == module_text(
		PRIMARY,
		'export interface Box<T extends any> { "value": T }',
		'export interface Holder<T extends Num> { "Items": T[] }',
		"export type Num = number /* int */ | number /* float64 */",
		"export type IntBox = Box<number /* int */>",
	)


def test_constant_literals_and_dropped_values():
	t, out = run(
		{
			PRIMARY: """package m

const (
	Complex = 1 + 2i
	MaxSafe = 1<<53 - 1
	MinSafe = -(1<<53 - 1)
	Name    = "x"
	Ratio   = 1.0 / 4
	TooBig  = 1 << 53
)
"""
		}
	)
	assert out["index"] == module_text(
		PRIMARY,
		"export const MaxSafe = 9007199254740991",
		"export const MinSafe = -9007199254740991",
		'export const Name = "x"',
		"export const Ratio = 0.25",
		"export const TooBig = 9007199254740992n",
	)
	assert [d.code for d in t.diagnostics] == ["unsupported-literal"]
	assert t.diagnostics[0].severity == "warning"


def test_unresolved_package_degrades_to_fallback():
	src = 'package m\n\nimport "time"\n\ntype Event struct {\n\tAt time.Time `json:"at"`\n}\n'
	t, out = run({PRIMARY: src})
	assert out == {
		"index": module_text(PRIMARY, 'export interface Event { "at": time.Time }', imports=["time"]),
		"time": module_text("time", "export type Time = any /* unresolved: time */"),
	}
	assert [d.code for d in t.diagnostics] == ["unresolved-reference"]

	t, out = run({PRIMARY: src}, type_mappings={"time.Time": "string"})
	assert out["time"] == module_text("time", "export type Time = string")
	assert t.diagnostics == []


def test_name_filter_pulls_in_dependencies_only():
	out = generate({PRIMARY: "package m\ntype A struct{ B B }\ntype B int\ntype C int\n"}, names=["A"])
	assert out["index"] == module_text(
		PRIMARY,
		'export interface A { "B": B }',
		"export type B = number /* int */",
	)


def test_include_unexported():
	src = "package m\ntype pub struct {\n\tx int\n\tY int\n}\ntype Q int\n"
	assert generate({PRIMARY: src})["index"] == module_text(PRIMARY, "export type Q = number /* int */")
	assert generate({PRIMARY: src}, include_unexported=True)["index"] == module_text(
		PRIMARY,
		"export type Q = number /* int */",
		'export interface pub { "x": number /* int */; "Y": number /* int */ }',
	)


@pytest.mark.parametrize(
	"mappings,expected",
	[
		({"int64": "bigint"}, "export type ID = bigint"),
		({"ID": "string"}, "export type ID = string"),
		({}, "export type ID = number /* int64 */"),
	],
)
def test_type_mappings(mappings, expected):
	out = generate({PRIMARY: "package m\ntype ID int64\n"}, type_mappings=mappings)
	assert out["index"] == module_text(PRIMARY, expected)


def test_mapping_for_a_symbol_of_another_package():
	out = generate(
		{
			PRIMARY: 'package m\nimport "example.com/geo"\ntype Shape struct{ At geo.Point }\n',
			"example.com/geo": "package geo\ntype Point struct{ X, Y float64 }\n",
		},
		type_mappings={"example.com/geo.Point": "[number, number]"},
	)
	assert out["geo"] == module_text("example.com/geo", "export type Point = [number, number]")


def test_secondary_units_keep_first_insertion_order():
	out = generate(
		{
			PRIMARY: 'package m\nimport "example.com/geo"\ntype Shape struct{ At geo.Point }\n',
			"example.com/geo": "package geo\ntype Line struct{ From, To Point }\ntype Point struct{ X, Y float64 }\n",
		},
		secondaries=["example.com/geo"],
	)
	assert out["geo"] == module_text(
		"example.com/geo",
		'export interface Point { "X": number /* float64 */; "Y": number /* float64 */ }',
		'export interface Line { "From": Point; "To": Point }',
	)


def test_secondary_name_selection():
	out = generate(
		{
			PRIMARY: "package m\ntype A int\n",
			"example.com/extra": "package extra\ntype X int\ntype Y string\n",
		},
		secondaries=[("example.com/extra", ["Y"])],
	)
	assert out["extra"] == module_text("example.com/extra", "export type Y = string")


def test_containers_and_opaque_types():
	out = generate(
		{
			PRIMARY: """package m

type H struct {
	Any   interface{}
	Err   error
	Index map[string]*int
	Ptrs  []*int
	Grid  [2][2]float64
}
"""
		},
		fallback_type="unknown",
	)
	assert out["index"] == module_text(
		PRIMARY,
		'export interface H { "Any": unknown; "Err": unknown /* error */; '
		'"Index": { [key in string]: number /* int */ | null }; "Ptrs": (number /* int */ | null)[]; '
		'"Grid": number /* float64 */[][] }',
	)


def test_failed_requested_unit_raises():
	with pytest.raises(UnitNotFoundError):
		run({PRIMARY: "package m\n"}, secondaries=["example.com/missing"])


def test_pointer_to_pointer_is_nullable_once():
	out = generate({PRIMARY: "package m\ntype S struct {\n\tA **int\n\tB *[]*int\n}\n"})
	assert out["index"] == module_text(
		PRIMARY,
		'export interface S { "A": number /* int */ | null; "B": (number /* int */ | null)[] | null }',
	)


def _unit(path: str, name: str, imports: list[str], *symbols: TypeName) -> CompilationUnit:
	return CompilationUnit(path=path, name=name, symbols={s.name: s for s in symbols}, imports=imports)


def test_mutual_reference_across_modules():
	a = TypeName(name="A", unit_path="x/a")
	b = TypeName(name="B", unit_path="x/b")
	a.underlying = Struct((Field("B", Pointer(Named(b))),))
	b.underlying = Struct((Field("A", Pointer(Named(a))),))
	program = SourceProgram()
	program.units["x/a"] = _unit("x/a", "a", ["x/b"], a)
	program.units["x/b"] = _unit("x/b", "b", ["x/a"], b)

	graph = Transpiler(program, UnitSelection.of("x/a"), [UnitSelection.of("x/b")]).run()
	assert list(graph["index"].imports) == ["b"]
	assert list(graph["b"].imports) == ["index"]
	out = {name: data.decode() for name, data in graph.generate().items()}
	assert out == {
		"b": module_text("x/b", 'export interface B { "A": index.A | null }', imports=["index"]),
		"index": module_text("x/a", 'export interface A { "B": b.B | null }', imports=["b"]),
	}


def test_cyclic_interface_embedding_does_not_loop():
	i = TypeName(name="I", unit_path=PRIMARY)
	j = TypeName(name="J", unit_path=PRIMARY)
	i.underlying = Interface((Named(j),))
	j.underlying = Interface((Named(i),))
	c = TypeName(
		name="C",
		unit_path=PRIMARY,
		underlying=Struct((Field("V", TypeParam("T", 0)),)),
		type_params=(TypeParamDef("T", 0, Named(i)),),
	)
	program = SourceProgram()
	program.units[PRIMARY] = _unit(PRIMARY, "m", [], c, i, j)

	out = Transpiler(program, UnitSelection.of(PRIMARY)).run().generate()
	assert out["index"].decode() == module_text(
		PRIMARY,
		'export interface C<T extends I> { "V": T }',
		"export type I = any",
		"export type J = any",
	)
