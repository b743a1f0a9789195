"""The ring Z[zeta8, j] of quaternions u + j*t with u, t in Z[zeta8]."""

from __future__ import annotations

from dataclasses import dataclass, field

import mpmath

from su2synth.zroot2 import Zroot2
from su2synth.zzeta8 import Zzeta8

_Scalar = (int, Zroot2, Zzeta8)


def _is_scalar(value: object) -> bool:
    return isinstance(value, _Scalar) and not isinstance(value, bool)


@dataclass(frozen=True, order=True)
class Zzeta8j:
    """An element u + j*t, where j*j = -1 and i*j = -j*i.

    As a 2x2 complex matrix it reads [[u, -conj(t)], [t, conj(u)]].
    """

    u: Zzeta8 = field(default_factory=Zzeta8)
    t: Zzeta8 = field(default_factory=Zzeta8)

    @classmethod
    def from_ints(
        cls,
        a1: int,
        b1: int,
        c1: int,
        d1: int,
        a2: int,
        b2: int,
        c2: int,
        d2: int,
    ) -> Zzeta8j:
        """Build u + j*t from the four coefficients of u and of t."""
        return cls(Zzeta8(a1, b1, c1, d1), Zzeta8(a2, b2, c2, d2))

    def norm_quaternion(self) -> Zroot2:
        """Return |u|**2 + |t|**2, an element of Z[sqrt 2]."""
        return self.u.norm_complex() + self.t.norm_complex()

    def norm_sqrt2(self) -> int:
        return self.norm_quaternion().norm_sqrt2()

    def conj_quaternion(self) -> Zzeta8j:
        return Zzeta8j(self.u.conj_complex(), -self.t)

    def conj_sqrt2(self) -> Zzeta8j:
        return Zzeta8j(self.u.conj_sqrt2(), self.t.conj_sqrt2())

    def to_matrix(self) -> mpmath.matrix:
        """Return the 2x2 complex matrix of this element."""
        return mpmath.matrix(
            [
                [self.u.to_complex(), -self.t.conj_complex().to_complex()],
                [self.t.to_complex(), self.u.conj_complex().to_complex()],
            ]
        )

    def mod2(self) -> Zzeta8j:
        """Reduce every integer coefficient modulo 2."""
        u, t = self.u, self.t
        return Zzeta8j.from_ints(
            u.a & 1, u.b & 1, u.c & 1, u.d & 1, t.a & 1, t.b & 1, t.c & 1, t.d & 1
        )

    def divisible(self, r: int | Zroot2 | Zzeta8) -> bool:
        """Tell whether the scalar r divides both u and t."""
        return self.u.divisible(r) and self.t.divisible(r)

    def left_divisible(self, r: Zzeta8j) -> bool:
        """Tell whether r**-1 * self lies in the ring."""
        numerator = r.norm_quaternion().conj_sqrt2() * (r.conj_quaternion() * self)
        return numerator.divisible(r.norm_sqrt2())

    def right_divisible(self, r: Zzeta8j) -> bool:
        """Tell whether self * r**-1 lies in the ring."""
        numerator = (self * r.conj_quaternion()) * r.norm_quaternion().conj_sqrt2()
        return numerator.divisible(r.norm_sqrt2())

    def __neg__(self) -> Zzeta8j:
        return Zzeta8j(-self.u, -self.t)

    def __mul__(self, other: object) -> Zzeta8j:
        if isinstance(other, Zzeta8j):
            u, t = self.u, self.t
            return Zzeta8j(
                u * other.u - t.conj_complex() * other.t,
                t * other.u + u.conj_complex() * other.t,
            )
        if _is_scalar(other):
            return Zzeta8j(self.u * other, self.t * other)
        return NotImplemented

    def __rmul__(self, other: object) -> Zzeta8j:
        if _is_scalar(other):
            return Zzeta8j(self.u * other, self.t * other)
        return NotImplemented

    def __truediv__(self, other: object) -> Zzeta8j:
        """Exact division by a scalar; raises ArithmeticError if it does not divide."""
        if not _is_scalar(other):
            return NotImplemented
        if not self.divisible(other):
            raise ArithmeticError("element is not divisible by the given element")
        return Zzeta8j(self.u / other, self.t / other)

    def __str__(self) -> str:
        return f"{self.u} {self.t}"


def left_div(x: Zzeta8j, y: Zzeta8j) -> Zzeta8j:
    """Return y**-1 * x; raises ArithmeticError if it is not in the ring."""
    if not x.left_divisible(y):
        raise ArithmeticError("second argument does not left-divide the first exactly")
    numerator = y.norm_quaternion().conj_sqrt2() * (y.conj_quaternion() * x)
    return numerator / y.norm_sqrt2()


def right_div(x: Zzeta8j, y: Zzeta8j) -> Zzeta8j:
    """Return x * y**-1; raises ArithmeticError if it is not in the ring."""
    if not x.right_divisible(y):
        raise ArithmeticError("second argument does not right-divide the first exactly")
    numerator = (x * y.conj_quaternion()) * y.norm_quaternion().conj_sqrt2()
    return numerator / y.norm_sqrt2()