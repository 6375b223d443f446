# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Output module names.

Every unit reachable from the requested units gets one short, unique module
name, fixed before any symbol is transpiled. The primary unit is always
`index`; the others use their package name, with `_1`, `_2`, ... appended on
collision. Units are named in (path length, package name, path) order, so the
shortest path keeps the bare name and the result is the same on every run.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from tgtt.core.symbols import SourceProgram

logger = logging.getLogger(__name__)

INDEX = "index"


class NameTable:
	"""Immutable import path -> module name mapping."""

	def __init__(self, names: Mapping[str, str], primary: str) -> None:
		self._names = MappingProxyType(dict(names))
		self.primary = primary

	@classmethod
	def build(cls, program: SourceProgram, primary: str, roots: Iterable[str]) -> "NameTable":
		roots = list(roots)
		if primary not in roots:
			roots.insert(0, primary)
		paths = [p for p in program.reachable(roots) if p != primary]
		paths.sort(key=lambda p: (len(p), program.package_name(p), p))

		names: Dict[str, str] = {primary: INDEX}
		taken = {INDEX}
		for path in paths:
			base = program.package_name(path)
			name = base
			suffix = 1
			while name in taken:
				name = f"{base}_{suffix}"
				suffix += 1
			taken.add(name)
			names[path] = name
			logger.debug("module %s <- %s", name, path)
		return cls(names, primary)

	def name_of(self, path: str) -> str:
		try:
			return self._names[path]
		except KeyError:
			raise KeyError(f"no module name assigned to package {path!r}") from None

	def __contains__(self, path: object) -> bool:
		return path in self._names

	def __iter__(self) -> Iterator[str]:
		return iter(self._names)

	def __len__(self) -> int:
		return len(self._names)

	def items(self) -> Iterator[Tuple[str, str]]:
		return iter(self._names.items())


__all__ = ["INDEX", "NameTable"]
