# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Output modules and their concurrent rendering.

A `Module` is filled in on a single thread while the transpiler walks the
type graph. Once construction is over the graph is read-only and
`ModuleGraph.render_all` renders and writes every module on a thread pool.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Sequence

logger = logging.getLogger(__name__)

Transform = Callable[[bytes], bytes]
WriteFn = Callable[[str, bytes], None]

# Installed before a symbol's body is transpiled; seeing it means the symbol
# is already in progress.
PLACEHOLDER = ""


class Module:
	"""
	One output file: ordered import edges and ordered definitions.

	`defs` preserves first-insertion order. The first insertion of a name
	wins: `reserve` installs the placeholder only if the name is absent.
	"""

	def __init__(self, name: str, unit_path: str) -> None:
		self.name = name
		self.unit_path = unit_path
		self.imports: Dict[str, Module] = {}
		self.defs: Dict[str, str] = {}

	def __repr__(self) -> str:
		return f"Module({self.name!r}, {self.unit_path!r})"

	def has(self, name: str) -> bool:
		return name in self.defs

	def reserve(self, name: str) -> bool:
		"""Install the in-progress placeholder; False if `name` is already present."""
		if name in self.defs:
			return False
		self.defs[name] = PLACEHOLDER
		return True

	def define(self, name: str, text: str) -> None:
		if self.defs.get(name, PLACEHOLDER) != PLACEHOLDER:
			raise ValueError(f"{self.name}: {name} is already defined")
		self.defs[name] = text

	def discard(self, name: str) -> None:
		if self.defs.get(name) == PLACEHOLDER:
			del self.defs[name]

	def add_import(self, other: "Module") -> None:
		if other is not self and other.name not in self.imports:
			self.imports[other.name] = other

	def render(self) -> bytes:
		parts = [f"/* {self.unit_path} */"]
		for name in self.imports:
			parts.append(f'\nimport * as {name} from "./{name}";')
		for text in self.defs.values():
			if text != PLACEHOLDER:
				parts.append(f"\n\n{text}")
		parts.append("\n")
		return "".join(parts).encode("utf-8")


class ModuleGraph:
	"""All output modules of one run, keyed by module name."""

	def __init__(self) -> None:
		self.modules: Dict[str, Module] = {}

	def module(self, name: str, unit_path: str) -> Module:
		mod = self.modules.get(name)
		if mod is None:
			mod = Module(name, unit_path)
			self.modules[name] = mod
		return mod

	def __getitem__(self, name: str) -> Module:
		return self.modules[name]

	def __contains__(self, name: object) -> bool:
		return name in self.modules

	def __iter__(self) -> Iterator[Module]:
		return iter(self.modules.values())

	def __len__(self) -> int:
		return len(self.modules)

	def render_all(self, write: WriteFn, *, limit: int = 0, transforms: Sequence[Transform] = ()) -> None:
		"""
		Render every module and hand the bytes to `write(name, data)`.

		At most `limit` modules are in flight at once (0 means no limit). The
		first failure stops new work from starting; work already running is
		allowed to finish and its outcome is discarded. The first error is then
		re-raised as is.
		"""
		if limit < 0:
			raise ValueError("limit must be >= 0")
		stop = threading.Event()
		lock = threading.Lock()
		errors: List[BaseException] = []
		slots = threading.BoundedSemaphore(limit) if limit else None

		def task(mod: Module) -> None:
			if stop.is_set():
				return
			data = mod.render()
			for transform in transforms:
				data = transform(data)
			write(mod.name, data)
			logger.debug("rendered module %s (%d bytes)", mod.name, len(data))

		def done(fut: Future) -> None:
			try:
				exc = None if fut.cancelled() else fut.exception()
				if exc is not None:
					with lock:
						if not errors:
							errors.append(exc)
					stop.set()
			finally:
				if slots is not None:
					slots.release()

		with ThreadPoolExecutor(max_workers=limit or None, thread_name_prefix="tgtt-render") as pool:
			for mod in list(self.modules.values()):
				if slots is not None:
					slots.acquire()
				if stop.is_set():
					if slots is not None:
						slots.release()
					break
				pool.submit(task, mod).add_done_callback(done)
		if errors:
			raise errors[0]

	def generate(self, *, limit: int = 0, transforms: Sequence[Transform] = ()) -> Dict[str, bytes]:
		"""Render into memory: module name -> bytes, sorted by name."""
		out: Dict[str, bytes] = {}
		lock = threading.Lock()

		def write(name: str, data: bytes) -> None:
			with lock:
				out[name] = data

		self.render_all(write, limit=limit, transforms=transforms)
		return dict(sorted(out.items()))

	def write_dir(self, path: Path | str, *, limit: int = 0, transforms: Sequence[Transform] = ()) -> None:
		"""Write `<name>.ts` for every module into `path` (created if needed)."""
		out_dir = Path(path)
		out_dir.mkdir(parents=True, exist_ok=True)

		def write(name: str, data: bytes) -> None:
			target = out_dir / f"{name}.ts"
			target.write_bytes(data)
			logger.debug("wrote %s", target)

		self.render_all(write, limit=limit, transforms=transforms)


__all__ = ["PLACEHOLDER", "Module", "ModuleGraph", "Transform", "WriteFn"]
