"""
Common diagnostic structure for loader/transpiler passes.

Diagnostics describe problems that were recovered from locally (a dropped
constant, a reference to a unit that could not be loaded). Fatal problems are
raised as exceptions from `tgtt.core.errors` and may carry diagnostics too.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a loader or transpiler diagnostic (error/warning)."""

	message: str
	code: str | None = None
	# Phase label: "load" for the Go reader, "transpile" for the core.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format_human(self) -> str:
		prefix = f"{self.span}: " if self.span.file or self.span.line else ""
		code = f"[{self.code}] " if self.code else ""
		text = f"{prefix}{self.severity}: {code}{self.message}"
		for note in self.notes:
			text += f"\n  note: {note}"
		return text
