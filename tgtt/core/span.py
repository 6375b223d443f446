# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by symbols and diagnostics.

A Span carries best-effort file/line/column info. Spans order by
(file, line, column) so declaration order can break ties deterministically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source position (best-effort file/line/column)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a lark token/tree meta (or anything exposing
		`line`/`column`).

		If `loc` is already a Span it is returned unchanged.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		return cls(
			file=file,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
		)

	def sort_key(self) -> tuple[str, int, int]:
		return (self.file or "", self.line or 0, self.column or 0)

	def __str__(self) -> str:
		parts = [self.file or "<unknown>"]
		if self.line is not None:
			parts.append(str(self.line))
			if self.column is not None:
				parts.append(str(self.column))
		return ":".join(parts)


__all__ = ["Span"]
