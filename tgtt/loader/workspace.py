# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Locating Go package sources.

A workspace maps import paths to the source files of one package. `Workspace`
reads a module checkout on disk; `MemoryWorkspace` serves sources from a dict
and is what the tests use.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import List, Mapping, Optional, Sequence, Tuple

from tgtt.core.errors import UnitNotFoundError

logger = logging.getLogger(__name__)

SourceList = List[Tuple[str, str]]

_MODULE_RE = re.compile(r'^\s*module\s+"?([^\s"]+)"?\s*$', re.MULTILINE)
_IGNORE_RE = re.compile(r"^//go:build\s+ignore\s*$", re.MULTILINE)


def _is_relative(pattern: str) -> bool:
	return pattern in (".", "..") or pattern.startswith("./") or pattern.startswith("../")


def _join(module_path: Optional[str], rel: str) -> str:
	if rel in ("", "."):
		return module_path or "."
	if module_path is None:
		return rel
	return f"{module_path}/{rel}"


class Workspace:
	"""
	Go sources under `root`.

	`root` is the directory holding `go.mod` (the module root). Import paths
	inside the module resolve under `root`; others are looked up in
	`root/vendor` and then in each of `search_paths`.
	"""

	def __init__(self, root: Path | str, search_paths: Sequence[Path | str] = ()) -> None:
		self.root = Path(root)
		self.search_paths = [Path(p) for p in search_paths]
		self.module_path = self._read_module_path()

	def _read_module_path(self) -> Optional[str]:
		go_mod = self.root / "go.mod"
		if not go_mod.is_file():
			return None
		m = _MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
		return m.group(1) if m else None

	def import_path(self, pattern: str) -> str:
		"""Turn `./models` style patterns into import paths; others pass through."""
		if not _is_relative(pattern):
			return pattern
		target = (self.root / pattern).resolve()
		try:
			rel = target.relative_to(self.root.resolve())
		except ValueError:
			raise UnitNotFoundError(f"{pattern} is outside the module root {self.root}", path=pattern) from None
		return _join(self.module_path, rel.as_posix())

	def locate(self, path: str) -> Optional[Path]:
		candidates: List[Path] = []
		mod = self.module_path
		if mod is not None and (path == mod or path.startswith(mod + "/")):
			candidates.append(self.root / path[len(mod) + 1 :] if path != mod else self.root)
		elif mod is None:
			candidates.append(self.root / path)
		candidates.append(self.root / "vendor" / path)
		candidates.extend(base / path for base in self.search_paths)
		for candidate in candidates:
			if candidate.is_dir():
				return candidate
		return None

	def read_unit(self, path: str) -> SourceList:
		"""Return `(file name, source)` pairs for the package at `path`, sorted by name."""
		directory = self.locate(path)
		if directory is None:
			raise UnitNotFoundError(f"cannot find package {path!r}", path=path)
		sources: SourceList = []
		for file in sorted(directory.glob("*.go")):
			if file.name.endswith("_test.go"):
				continue
			text = file.read_text(encoding="utf-8")
			if _IGNORE_RE.search(text):
				continue
			sources.append((str(file), text))
		if not sources:
			raise UnitNotFoundError(f"no Go files in {directory}", path=path)
		logger.debug("package %s: %d file(s) in %s", path, len(sources), directory)
		return sources


class MemoryWorkspace:
	"""
	In-memory sources: `{import path: {file name: source}}`.

	`module_path` plays the role of the `go.mod` module line for relative
	patterns.
	"""

	def __init__(self, sources: Mapping[str, Mapping[str, str]], *, module_path: Optional[str] = None) -> None:
		self.sources = {path: dict(files) for path, files in sources.items()}
		self.module_path = module_path

	def import_path(self, pattern: str) -> str:
		if not _is_relative(pattern):
			return pattern
		rel = PurePosixPath(pattern).as_posix()
		if rel.startswith("./"):
			rel = rel[2:]
		return _join(self.module_path, rel)

	def read_unit(self, path: str) -> SourceList:
		files = self.sources.get(path)
		if not files:
			raise UnitNotFoundError(f"cannot find package {path!r}", path=path)
		return sorted(
			(name, text) for name, text in files.items() if not name.endswith("_test.go")
		)


__all__ = ["Workspace", "MemoryWorkspace", "SourceList"]
