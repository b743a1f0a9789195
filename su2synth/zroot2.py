"""The ring Z[sqrt 2] of numbers a + b*sqrt(2) with integer a, b."""

from __future__ import annotations

from dataclasses import dataclass

from mpmath import mpf

from su2synth.numeric import sqrt2


def _coerce(value: object) -> Zroot2 | None:
    if isinstance(value, Zroot2):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Zroot2(value)
    return None


@dataclass(frozen=True, order=True)
class Zroot2:
    """An element a + b*sqrt(2) of Z[sqrt 2]."""

    a: int = 0
    b: int = 0

    def norm_sqrt2(self) -> int:
        """Return the norm a**2 - 2*b**2."""
        return self.a * self.a - 2 * self.b * self.b

    def conj_sqrt2(self) -> Zroot2:
        """Return the conjugate a - b*sqrt(2)."""
        return Zroot2(self.a, -self.b)

    def to_real(self) -> mpf:
        return mpf(self.a) + mpf(self.b) * sqrt2()

    def divisible(self, r: int | Zroot2) -> bool:
        """Tell whether r divides this element in Z[sqrt 2]."""
        if isinstance(r, Zroot2):
            return (self * r.conj_sqrt2()).divisible(r.norm_sqrt2())
        if isinstance(r, int) and not isinstance(r, bool):
            return self.a % r == 0 and self.b % r == 0
        raise TypeError(f"cannot test divisibility by {type(r).__name__}")

    def __add__(self, other: object) -> Zroot2:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        return Zroot2(self.a + r.a, self.b + r.b)

    def __radd__(self, other: object) -> Zroot2:
        return self.__add__(other)

    def __sub__(self, other: object) -> Zroot2:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        return Zroot2(self.a - r.a, self.b - r.b)

    def __rsub__(self, other: object) -> Zroot2:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        return r - self

    def __neg__(self) -> Zroot2:
        return Zroot2(-self.a, -self.b)

    def __mul__(self, other: object) -> Zroot2:
        r = _coerce(other)
        if r is None:
            return NotImplemented
        return Zroot2(self.a * r.a + 2 * self.b * r.b, self.a * r.b + self.b * r.a)

    def __rmul__(self, other: object) -> Zroot2:
        return self.__mul__(other)

    def __truediv__(self, other: object) -> Zroot2:
        """Exact division; raises ArithmeticError if it does not divide."""
        if isinstance(other, Zroot2):
            if not self.divisible(other):
                raise ArithmeticError("element is not divisible by the given element")
            return (self * other.conj_sqrt2()) / other.norm_sqrt2()
        if isinstance(other, int) and not isinstance(other, bool):
            if not self.divisible(other):
                raise ArithmeticError("element is not divisible by the given element")
            return Zroot2(self.a // other, self.b // other)
        return NotImplemented

    def __str__(self) -> str:
        return f"({self.a}, {self.b})"