#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

from fractions import Fraction

import pytest

from tgtt.transpiler.const_encoder import MAX_SAFE_INTEGER, MIN_SAFE_INTEGER, encode, format_float


@pytest.mark.parametrize(
	"value,text",
	[
		(True, "true"),
		(False, "false"),
		("plain", '"plain"'),
		('quote " and \\ and \n', '"quote \\" and \\\\ and \\n"'),
		("héllo", '"héllo"'),
		(0, "0"),
		(-42, "-42"),
		(MAX_SAFE_INTEGER, "9007199254740991"),
		(MIN_SAFE_INTEGER, "-9007199254740991"),
		(MAX_SAFE_INTEGER + 1, "9007199254740992n"),
		(MIN_SAFE_INTEGER - 1, "-9007199254740992n"),
		(1 << 64, "18446744073709551616n"),
		(Fraction(1, 2), "0.5"),
		(Fraction(1, 3), "0.3333333333333333"),
		(2.0, "2"),
		(1e6, "1e+06"),
		(123456.0, "123456"),
		(1.5e-7, "1.5e-07"),
		(0.0001, "0.0001"),
		(-0.0, "-0"),
	],
)
def test_encode(value, text):
	assert encode(value) == (text, True)


@pytest.mark.parametrize("value", [complex(1, 2), float("inf"), float("nan"), None, Fraction(10**400, 1)])
def test_values_without_literal(value):
	assert encode(value) == ("", False)


def test_format_float_large_and_small():
	assert format_float(1.7976931348623157e308) == "1.7976931348623157e+308"
	assert format_float(5e-324) == "5e-324"
	assert format_float(100.25) == "100.25"
