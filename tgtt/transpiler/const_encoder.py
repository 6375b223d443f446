# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Constant values to TypeScript literal text."""
from __future__ import annotations

import json
import math
from decimal import Decimal
from fractions import Fraction
from typing import Tuple

# Largest integer a JS number holds exactly (Number.MAX_SAFE_INTEGER).
MAX_SAFE_INTEGER = 2**53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER


def encode(value: object) -> Tuple[str, bool]:
	"""
	Return `(text, ok)`. `ok` is False for values with no literal form
	(complex numbers, non-finite floats, rationals too large for a double,
	None).
	"""
	if isinstance(value, bool):
		return ("true" if value else "false"), True
	if isinstance(value, str):
		return json.dumps(value, ensure_ascii=False), True
	if isinstance(value, int):
		text = str(value)
		if value < MIN_SAFE_INTEGER or value > MAX_SAFE_INTEGER:
			text += "n"
		return text, True
	if isinstance(value, Fraction):
		try:
			value = float(value)
		except OverflowError:
			return "", False
	if isinstance(value, float):
		if not math.isfinite(value):
			return "", False
		return format_float(value), True
	return "", False


def format_float(f: float) -> str:
	"""
	Shortest text that reads back as `f`, in `%g` style: exponent form when
	the decimal exponent is below -4 or at least 6 (`1e+06`), plain decimal
	otherwise (`123456`, `0.5`).
	"""
	if f == 0:
		return "-0" if math.copysign(1.0, f) < 0 else "0"
	sign = "-" if f < 0 else ""
	_, digits, exponent = Decimal(repr(abs(f))).normalize().as_tuple()
	ds = "".join(str(d) for d in digits)
	nd = len(ds)
	dp = nd + exponent
	exp = dp - 1
	if exp < -4 or exp >= 6:
		mant = ds[0] + ("." + ds[1:] if nd > 1 else "")
		return f"{sign}{mant}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
	if dp <= 0:
		return f"{sign}0.{'0' * -dp}{ds}"
	if dp >= nd:
		return f"{sign}{ds}{'0' * (dp - nd)}"
	return f"{sign}{ds[:dp]}.{ds[dp:]}"


__all__ = ["MAX_SAFE_INTEGER", "MIN_SAFE_INTEGER", "encode", "format_float"]
