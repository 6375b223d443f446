# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Builders shared by the tgtt tests: in-memory Go packages to TypeScript."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Sequence, Tuple, Union

from tgtt.core.symbols import SourceProgram
from tgtt.loader import MemoryWorkspace, load_program
from tgtt.transpiler import Transpiler, TranspilerOptions, UnitSelection

PRIMARY = "example.com/m"

UnitSources = Mapping[str, Union[str, Mapping[str, str]]]


def workspace_of(units: UnitSources, *, module_path: str | None = None) -> MemoryWorkspace:
	"""`{path: source}` or `{path: {file: source}}`; a bare source is stored as `<pkg>.go`."""
	sources: Dict[str, Dict[str, str]] = {}
	for path, src in units.items():
		if isinstance(src, str):
			sources[path] = {path.rsplit("/", 1)[-1] + ".go": src}
		else:
			sources[path] = dict(src)
	return MemoryWorkspace(sources, module_path=module_path)


def program_of(units: UnitSources, roots: Sequence[str] = (PRIMARY,)) -> SourceProgram:
	return load_program(workspace_of(units), roots)


def run(
	units: UnitSources,
	primary: str = PRIMARY,
	*,
	names: Iterable[str] = (),
	secondaries: Sequence[Union[str, Tuple[str, Iterable[str]]]] = (),
	**options,
) -> Tuple[Transpiler, Dict[str, str]]:
	"""Load, transpile and render; returns the transpiler and `{module: text}`."""
	selections = [UnitSelection.of(s) if isinstance(s, str) else UnitSelection.of(*s) for s in secondaries]
	program = program_of(units, [primary, *(s.path for s in selections)])
	t = Transpiler(program, UnitSelection.of(primary, names), selections, TranspilerOptions(**options))
	graph = t.run()
	return t, {name: data.decode("utf-8") for name, data in graph.generate().items()}


def generate(units: UnitSources, primary: str = PRIMARY, **kwargs) -> Dict[str, str]:
	return run(units, primary, **kwargs)[1]


def module_text(path: str, *defs: str, imports: Iterable[str] = ()) -> str:
	"""Expected rendering of one module."""
	out = f"/* {path} */"
	for name in imports:
		out += f'\nimport * as {name} from "./{name}";'
	for d in defs:
		out += f"\n\n{d}"
	return out + "\n"


__all__ = ["PRIMARY", "workspace_of", "program_of", "run", "generate", "module_text"]
