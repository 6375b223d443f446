#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Module bookkeeping, name assignment and concurrent rendering."""

from __future__ import annotations

import threading
import time

import pytest

from tgtt.core.symbols import CompilationUnit, SourceProgram
from tgtt.transpiler.module import Module, ModuleGraph
from tgtt.transpiler.naming import NameTable


def test_module_render_layout():
	geo = Module("geo", "example.com/geo")
	m = Module("index", "example.com/m")
	m.add_import(geo)
	m.add_import(geo)
	m.add_import(m)
	assert m.reserve("A")
	m.define("A", "export type A = geo.Point")
	assert m.reserve("B")
	assert not m.reserve("A")
	assert m.render() == (
		b'/* example.com/m */\nimport * as geo from "./geo";\n\nexport type A = geo.Point\n'
	)


def test_first_definition_wins_and_discard_only_drops_placeholders():
	m = Module("index", "p")
	m.reserve("X")
	m.define("X", "export const X = 1")
	with pytest.raises(ValueError):
		m.define("X", "export const X = 2")
	m.discard("X")
	assert m.has("X")
	m.reserve("Y")
	m.discard("Y")
	assert not m.has("Y")


def test_empty_module_renders_header_only():
	assert Module("index", "example.com/m").render() == b"/* example.com/m */\n"


def _program(units: dict[str, tuple[str, list[str]]]) -> SourceProgram:
	program = SourceProgram()
	for path, (name, imports) in units.items():
		program.units[path] = CompilationUnit(path=path, name=name, imports=imports)
	return program


def test_name_table_suffixes_collisions_by_path_length_then_path():
	program = _program(
		{
			"example.com/m": ("m", ["example.com/b/util", "example.com/a/util", "x/util", "example.com/index"]),
			"example.com/b/util": ("util", []),
			"example.com/a/util": ("util", []),
			"x/util": ("util", []),
			"example.com/index": ("index", []),
		}
	)
	names = NameTable.build(program, "example.com/m", ["example.com/m"])
	assert names.name_of("example.com/m") == "index"
	assert names.name_of("x/util") == "util"
	assert names.name_of("example.com/a/util") == "util_1"
	assert names.name_of("example.com/b/util") == "util_2"
	assert names.name_of("example.com/index") == "index_1"
	with pytest.raises(KeyError):
		names.name_of("unknown")


def test_name_table_covers_failed_units():
	program = _program({"example.com/m": ("m", ["gopkg.in/yaml.v3"])})
	names = NameTable.build(program, "example.com/m", ["example.com/m"])
	assert dict(names.items()) == {"example.com/m": "index", "gopkg.in/yaml.v3": "yaml_v3"}


def _graph(*names: str) -> ModuleGraph:
	graph = ModuleGraph()
	for name in names:
		mod = graph.module(name, f"example.com/{name}")
		mod.reserve("T")
		mod.define("T", f"export type T = {name!r}")
	return graph


def test_generate_is_sorted_and_applies_transforms():
	graph = _graph("zeta", "alpha")
	out = graph.generate(transforms=[lambda b: b.replace(b"export ", b""), lambda b: b.upper()])
	assert list(out) == ["alpha", "zeta"]
	assert out["alpha"] == b"/* EXAMPLE.COM/ALPHA */\n\nTYPE T = 'ALPHA'\n"


def test_write_dir(tmp_path):
	_graph("index", "geo").write_dir(tmp_path / "out")
	assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["geo.ts", "index.ts"]
	assert (tmp_path / "out" / "geo.ts").read_text() == "/* example.com/geo */\n\nexport type T = 'geo'\n"


def test_first_error_stops_new_work():
	graph = _graph("a", "b", "c", "d")
	written: list[str] = []

	def write(name: str, data: bytes) -> None:
		if name == "b":
			raise OSError("disk full")
		written.append(name)

	with pytest.raises(OSError, match="disk full"):
		graph.render_all(write, limit=1)
	assert written == ["a"]


def test_transform_error_propagates_unchanged():
	class Boom(Exception):
		pass

	def explode(data: bytes) -> bytes:
		raise Boom()

	with pytest.raises(Boom):
		_graph("a").generate(transforms=[explode])


def test_limit_bounds_tasks_in_flight():
	graph = _graph(*(f"m{i}" for i in range(12)))
	lock = threading.Lock()
	active = 0
	peak = 0

	def write(name: str, data: bytes) -> None:
		nonlocal active, peak
		with lock:
			active += 1
			peak = max(peak, active)
		time.sleep(0.01)
		with lock:
			active -= 1

	graph.render_all(write, limit=3)
	assert 1 <= peak <= 3


def test_negative_limit_is_rejected():
	with pytest.raises(ValueError):
		_graph("a").render_all(lambda n, d: None, limit=-1)
