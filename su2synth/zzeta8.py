"""The cyclotomic ring Z[zeta8], zeta8 = exp(i*pi/4)."""

from __future__ import annotations

from dataclasses import dataclass

from mpmath import mpc

from su2synth.numeric import zeta8
from su2synth.zroot2 import Zroot2


def _coerce(value: object) -> Zzeta8 | None:
    if isinstance(value, Zzeta8):
        return value
    if isinstance(value, Zroot2):
        return Zzeta8.from_zroot2(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return Zzeta8(value)
    return None


@dataclass(frozen=True, order=True)
class Zzeta8:
    """An element a + b*z + c*z**2 + d*z**3 with z = exp(i*pi/4)."""

    a: int = 0
    b: int = 0
    c: int = 0
    d: int = 0

    @classmethod
    def from_zroot2(cls, r: Zroot2) -> Zzeta8:
        """Embed a + b*sqrt(2), using sqrt(2) = z - z**3."""
        return cls(r.a, r.b, 0, -r.b)

    def norm_complex(self) -> Zroot2:
        """Return the squared complex modulus, an element of Z[sqrt 2]."""
        a, b, c, d = self.a, self.b, self.c, self.d
        return Zroot2(a * a + b * b + c * c + d * d, a * b - a * d + c * b + c * d)

    def norm_sqrt2(self) -> int:
        return self.norm_complex().norm_sqrt2()

    def conj_complex(self) -> Zzeta8:
        return Zzeta8(self.a, -self.d, -self.c, -self.b)

    def conj_sqrt2(self) -> Zzeta8:
        return Zzeta8(self.a, -self.b, self.c, -self.d)

    def to_complex(self) -> mpc:
        z = zeta8()
        z2 = z * z
        z3 = z * z * z
        return mpc(self.a) + self.b * z + self.c * z2 + self.d * z3

    def divisible(self, r: int | Zroot2 | Zzeta8) -> bool:
        """Tell whether r divides this element in Z[zeta8]."""
        if isinstance(r, Zroot2):
            r = Zzeta8.from_zroot2(r)
        if isinstance(r, Zzeta8):
            numerator = self * r.conj_complex()
            numerator = numerator * r.norm_complex().conj_sqrt2()
            return numerator.divisible(r.norm_sqrt2())
        if isinstance(r, int) and not isinstance(r, bool):
            return all(x % r == 0 for x in (self.a, self.b, self.c, self.d))
        raise TypeError(f"cannot test divisibility by {type(r).__name__}")

    def __add__(self, other: object) -> Zzeta8:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        return Zzeta8(self.a + r.a, self.b + r.b, self.c + r.c, self.d + r.d)

    def __radd__(self, other: object) -> Zzeta8:
        return self.__add__(other)

    def __sub__(self, other: object) -> Zzeta8:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        return Zzeta8(self.a - r.a, self.b - r.b, self.c - r.c, self.d - r.d)

    def __rsub__(self, other: object) -> Zzeta8:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        return r - self

    def __neg__(self) -> Zzeta8:
        return Zzeta8(-self.a, -self.b, -self.c, -self.d)

    def __mul__(self, other: object) -> Zzeta8:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        a, b, c, d = self.a, self.b, self.c, self.d
        return Zzeta8(
            a * r.a - b * r.d - c * r.c - d * r.b,
            a * r.b + b * r.a - c * r.d - d * r.c,
            a * r.c + b * r.b + c * r.a - d * r.d,
            a * r.d + b * r.c + c * r.b + d * r.a,
        )

    def __rmul__(self, other: object) -> Zzeta8:
        return self.__mul__(other)

    def __truediv__(self, other: object) -> Zzeta8:
        """Exact division; raises ArithmeticError if it does not divide."""
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            if not self.divisible(other):
                raise ArithmeticError("element is not divisible by the given element")
            return Zzeta8(self.a // other, self.b // other, self.c // other, self.d // other)
        if isinstance(other, Zroot2):
            if not self.divisible(other):
                raise ArithmeticError("element is not divisible by the given element")
            return self / Zzeta8.from_zroot2(other)
        if isinstance(other, Zzeta8):
            if not self.divisible(other):
                raise ArithmeticError("element is not divisible by the given element")
            numerator = self * other.conj_complex()
            denominator_conj = other.norm_complex().conj_sqrt2()
            numerator = numerator * Zzeta8(
                denominator_conj.a, denominator_conj.b, 0, -denominator_conj.b
            )
            return numerator / other.norm_sqrt2()
        return NotImplemented

    def __str__(self) -> str:
        return f"({self.a}, {self.b}, {self.c}, {self.d})"