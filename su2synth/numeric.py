"""Arbitrary-precision real numbers, constants and rounding helpers."""

from __future__ import annotations

import enum
import math
from fractions import Fraction
from typing import Any, TypeVar

import mpmath
from mpmath import mp, mpc, mpf

T = TypeVar("T")


class Status(enum.Enum):
    """Outcome of an iterative computation."""

    SUCCESS = enum.auto()
    FAILURE = enum.auto()
    TIMEOUT = enum.auto()


def set_precision(bits: int) -> None:
    """Set the working precision, in bits, of all real arithmetic."""
    if bits < 2:
        raise ValueError(f"precision must be at least 2 bits, got {bits}")
    mp.prec = bits


def get_precision() -> int:
    """Return the working precision in bits."""
    return mp.prec


def epsilon() -> mpf:
    """Return 2**-p where p is the working precision."""
    return mpmath.ldexp(mpf(1), -mp.prec)


def digits10() -> int:
    """Return the number of decimal digits the working precision carries."""
    return math.floor(mp.prec * 0.3010299956639812)


def pi() -> mpf:
    return +mp.pi


def sqrt2() -> mpf:
    return mpmath.sqrt(mpf(2))


def inv_sqrt2() -> mpf:
    return mpmath.sqrt(mpf("0.5"))


def zeta8() -> mpc:
    """Return exp(i*pi/4)."""
    return mpc(inv_sqrt2(), inv_sqrt2())


def zeta16() -> mpc:
    """Return exp(i*pi/8)."""
    angle = pi() / 8
    return mpc(mpmath.cos(angle), mpmath.sin(angle))


def _exact(x: Any) -> Fraction:
    if isinstance(x, bool):
        raise TypeError("booleans are not numbers here")
    if isinstance(x, int):
        return Fraction(x)
    if isinstance(x, Fraction):
        return x
    value = mpf(x)
    if not mpmath.isfinite(value):
        raise ValueError(f"cannot convert non-finite value {value} to an integer")
    man, exp = value.man_exp
    return Fraction(man) * Fraction(2) ** exp


def round_to_int(x: Any) -> int:
    """Round to the nearest integer, ties to even."""
    return round(_exact(x))


def ceil_to_int(x: Any) -> int:
    return math.ceil(_exact(x))


def floor_to_int(x: Any) -> int:
    return math.floor(_exact(x))


def pow_ui(x: T, n: int) -> T:
    """Raise x to a non-negative integer power by repeated squaring."""
    if n < 0:
        raise ValueError(f"exponent must be non-negative, got {n}")
    result = None
    base = x
    while n > 0:
        if n & 1:
            result = base if result is None else result * base
        base = base * base
        n >>= 1
    if result is None:
        return type(x)(1)
    return result