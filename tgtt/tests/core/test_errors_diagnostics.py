#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

from tgtt.core.diagnostics import Diagnostic
from tgtt.core.errors import ConfigError, SourceError, TgttError, UnitLoadError
from tgtt.core.span import Span


def test_diagnostic_format_human():
	d = Diagnostic(
		message="undefined: Foo",
		code="undefined",
		severity="error",
		span=Span(file="a.go", line=3, column=7),
		notes=["declared in package m"],
	)
	assert d.format_human() == "a.go:3:7: error: [undefined] undefined: Foo\n  note: declared in package m"


def test_diagnostic_without_span():
	d = Diagnostic(message="dropped", severity="warning")
	assert d.span == Span()
	assert d.format_human() == "warning: dropped"


def test_source_error_lists_its_diagnostics():
	err = SourceError(
		"package m: 1 error(s)",
		path="m",
		diagnostics=[Diagnostic(message="undefined: X", span=Span(file="m.go", line=2, column=1))],
	)
	assert isinstance(err, UnitLoadError)
	assert err.path == "m"
	assert str(err) == "package m: 1 error(s)\nm.go:2:1: error: undefined: X"


def test_config_error_is_a_value_error():
	err = ConfigError("bad")
	assert isinstance(err, TgttError)
	assert isinstance(err, ValueError)


def test_span_from_loc_and_ordering():
	class Tok:
		line = 4
		column = 2

	span = Span.from_loc(Tok(), file="x.go")
	assert str(span) == "x.go:4:2"
	assert Span.from_loc(span) is span
	assert Span(file="a.go", line=9).sort_key() < Span(file="b.go", line=1).sort_key()
