# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Exception hierarchy.

Only malformed requested units, invalid configuration and render/write
failures stop a run. Write failures are not wrapped: the original exception
(usually `OSError`) reaches the caller unchanged.
"""

from __future__ import annotations

from typing import Sequence

from .diagnostics import Diagnostic


class TgttError(Exception):
	"""Base class for user-facing tgtt errors."""


class UnitLoadError(TgttError):
	"""A compilation unit could not be loaded at all."""

	def __init__(self, message: str, *, path: str) -> None:
		super().__init__(message)
		self.path = path


class UnitNotFoundError(UnitLoadError):
	"""No source directory exists for the import path."""


class SourceError(UnitLoadError):
	"""
	The unit's sources are malformed: a syntax error, an undefined name, an
	import cycle or mismatched package clauses.
	"""

	def __init__(self, message: str, *, path: str, diagnostics: Sequence[Diagnostic] = ()) -> None:
		super().__init__(message, path=path)
		self.diagnostics = list(diagnostics)

	def __str__(self) -> str:
		if not self.diagnostics:
			return super().__str__()
		lines = [super().__str__()]
		lines.extend(d.format_human() for d in self.diagnostics)
		return "\n".join(lines)


class ConfigError(TgttError, ValueError):
	"""Invalid configuration file."""


__all__ = ["TgttError", "UnitLoadError", "UnitNotFoundError", "SourceError", "ConfigError"]
