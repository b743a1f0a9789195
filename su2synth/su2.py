"""Elements of SU(2) as unit quaternions."""

from __future__ import annotations

import random
from dataclasses import dataclass, fields

import mpmath
from mpmath import mpc, mpf

from su2synth.numeric import epsilon

_shared_rng = random.Random()


@dataclass(frozen=True)
class SU2:
    """The matrix [[a + i*b, -c + i*d], [c + i*d, a - i*b]]."""

    a: mpf = 1
    b: mpf = 0
    c: mpf = 0
    d: mpf = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, mpf(getattr(self, f.name)))

    @classmethod
    def from_complex(cls, u: complex | mpc, t: complex | mpc) -> SU2:
        """Build the matrix whose first column is (u, t)."""
        u, t = mpc(u), mpc(t)
        return cls(u.real, u.imag, t.real, t.imag)

    def adjoint(self) -> SU2:
        return SU2(self.a, -self.b, -self.c, -self.d)

    def determinant(self) -> mpf:
        return self.a * self.a + self.b * self.b + self.c * self.c + self.d * self.d

    def trace(self) -> mpf:
        return 2 * self.a

    def to_matrix(self) -> mpmath.matrix:
        u = mpc(self.a, self.b)
        t = mpc(self.c, self.d)
        return mpmath.matrix([[u, -mpmath.conj(t)], [t, mpmath.conj(u)]])

    def is_unitary(self, tol: mpf | None = None) -> bool:
        """Tell whether the determinant is one within tol (default 10 ulp)."""
        if tol is None:
            tol = epsilon() * 10
        return abs(self.determinant() - 1) < tol

    def unitalize(self) -> SU2:
        """Return this element scaled to determinant one."""
        norm = mpmath.sqrt(self.determinant())
        return SU2(self.a / norm, self.b / norm, self.c / norm, self.d / norm)

    def __mul__(self, other: object) -> SU2:
        if not isinstance(other, SU2):
            return NotImplemented
        a, b, c, d = self.a, self.b, self.c, self.d
        return SU2(
            a * other.a - b * other.b - c * other.c - d * other.d,
            a * other.b + b * other.a - c * other.d + d * other.c,
            a * other.c + b * other.d + c * other.a - d * other.b,
            a * other.d - b * other.c + c * other.b + d * other.a,
        )

    def __str__(self) -> str:
        return f"({self.a}, {self.b}, {self.c}, {self.d})"


def distance(u: SU2, v: SU2) -> mpf:
    """Return sqrt(1 - tr(U V^dagger)**2 / 4)."""
    tr = (u * v.adjoint()).trace()
    value = 1 - tr * tr / 4
    return mpmath.sqrt(max(value, mpf(0)))


def set_random_unitary_seed(seed: int) -> None:
    """Seed the generator that random_unitary uses when given no seed."""
    _shared_rng.seed(seed)


def random_unitary(seed: int | random.Random | None = None) -> SU2:
    """Return a Haar-random element of SU(2).

    With no seed the shared generator is used; an integer seeds a fresh one.
    """
    if seed is None:
        rng = _shared_rng
    elif isinstance(seed, random.Random):
        rng = seed
    else:
        rng = random.Random(seed)
    components = [rng.gauss(0.0, 1.0) for _ in range(4)]
    return SU2(*components).unitalize()