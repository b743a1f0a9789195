"""Exact Clifford+T synthesis of unitaries over Z[1/sqrt 2, zeta8]."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

import mpmath

from su2synth.numeric import pow_ui, sqrt2, zeta16
from su2synth.su2 import SU2
from su2synth.zroot2 import Zroot2
from su2synth.zzeta8 import Zzeta8
from su2synth.zzeta8j import Zzeta8j

E = TypeVar("E", Zroot2, Zzeta8)
Matrix = tuple[tuple[E, ...], ...]

_ROOT2_IN_ZROOT2 = Zroot2(0, 1)
_ROOT2_IN_ZZETA8 = Zzeta8.from_zroot2(Zroot2(0, 1))
_ZETA8 = Zzeta8(0, 1, 0, 0)
_ZETA8_POWERS = [Zzeta8(1)]
for _ in range(7):
    _ZETA8_POWERS.append(_ZETA8_POWERS[-1] * _ZETA8)


def _matmul(x: Matrix, y: Matrix, zero: E) -> Matrix:
    columns = list(zip(*y))
    return tuple(
        tuple(sum((a * b for a, b in zip(row, col)), zero) for col in columns) for row in x
    )


def _reduce(mat: Matrix, k: int, root: E) -> tuple[Matrix, int]:
    """Divide every entry by sqrt(2) while all of them allow it."""
    while k > 0:
        scaled = tuple(tuple(e * root for e in row) for row in mat)
        if not all(e.divisible(2) for row in scaled for e in row):
            break
        mat = tuple(tuple(e / 2 for e in row) for row in scaled)
        k -= 1
    return mat, k


def _convert(mat: object, size: int, make: Callable[[object], E]) -> Matrix:
    rows = tuple(tuple(make(e) for e in row) for row in mat)
    if len(rows) != size or any(len(row) != size for row in rows):
        raise ValueError(f"expected a {size}x{size} matrix")
    return rows


def _as_zroot2(value: object) -> Zroot2:
    return value if isinstance(value, Zroot2) else Zroot2(value)


def _as_zzeta8(value: object) -> Zzeta8:
    if isinstance(value, Zzeta8):
        return value
    if isinstance(value, Zroot2):
        return Zzeta8.from_zroot2(value)
    return Zzeta8(value)


_IDENTITY3 = tuple(tuple(Zroot2(1 if i == j else 0) for j in range(3)) for i in range(3))
_IDENTITY2 = tuple(tuple(Zzeta8(1 if i == j else 0) for j in range(2)) for i in range(2))


@dataclass(frozen=True)
class SO3Droot2:
    """A rotation mat / sqrt(2)**k with mat over Z[sqrt 2], kept reduced."""

    mat: Matrix = _IDENTITY3
    k: int = 0

    def __post_init__(self) -> None:
        if self.k < 0:
            raise ValueError("the exponent k must be non-negative")
        mat, k = _reduce(_convert(self.mat, 3, _as_zroot2), self.k, _ROOT2_IN_ZROOT2)
        object.__setattr__(self, "mat", mat)
        object.__setattr__(self, "k", k)

    def transpose(self) -> SO3Droot2:
        return SO3Droot2(tuple(zip(*self.mat)), self.k)

    def __mul__(self, other: object) -> SO3Droot2:
        if not isinstance(other, SO3Droot2):
            return NotImplemented
        return SO3Droot2(_matmul(self.mat, other.mat, Zroot2()), self.k + other.k)


def _dagger(mat: Matrix) -> Matrix:
    return tuple(tuple(e.conj_complex() for e in col) for col in zip(*mat))


@dataclass(frozen=True)
class U2Dzeta8:
    """A unitary mat / sqrt(2)**k with mat over Z[zeta8], kept reduced."""

    mat: Matrix = _IDENTITY2
    k: int = 0

    def __post_init__(self) -> None:
        if self.k < 0:
            raise ValueError("the exponent k must be non-negative")
        mat = _convert(self.mat, 2, _as_zzeta8)
        scale = Zzeta8(1 << self.k)
        expected = ((scale, Zzeta8()), (Zzeta8(), scale))
        if _matmul(mat, _dagger(mat), Zzeta8()) != expected:
            raise ValueError("the given matrix is not in U(2)")
        mat, k = _reduce(mat, self.k, _ROOT2_IN_ZZETA8)
        object.__setattr__(self, "mat", mat)
        object.__setattr__(self, "k", k)

    @classmethod
    def from_column(cls, u: Zzeta8, t: Zzeta8, l: int, k: int) -> U2Dzeta8:
        """Build [[u, -conj(t) z**l], [t, conj(u) z**l]] / sqrt(2)**k."""
        if u.norm_complex() + t.norm_complex() != Zroot2(1 << k):
            raise ValueError("the given column does not have unit norm")
        phase = _ZETA8_POWERS[l % 8]
        mat = ((u, -(t.conj_complex() * phase)), (t, u.conj_complex() * phase))
        return cls(mat, k)

    @classmethod
    def from_zzeta8j(cls, q: Zzeta8j, l: int, k: int) -> U2Dzeta8:
        return cls.from_column(q.u, q.t, l, k)

    @classmethod
    def from_sequence(cls, sequence: str) -> U2Dzeta8:
        """Multiply out a word over the gates H, S and T, left to right."""
        gates = {"H": H_U2, "S": S_U2, "T": T_U2}
        result = cls()
        for gate in sequence:
            try:
                result = result * gates[gate]
            except KeyError:
                raise ValueError(f"unsupported gate: {gate!r}") from None
        return result

    def adjoint(self) -> U2Dzeta8:
        return U2Dzeta8(_dagger(self.mat), self.k)

    def to_matrix(self) -> mpmath.matrix:
        scale = pow_ui(sqrt2(), self.k)
        return mpmath.matrix([[e.to_complex() / scale for e in row] for row in self.mat])

    def _phase_power(self) -> int:
        (u, minus_t_phase), (t, u_phase) = self.mat
        for l, phase in enumerate(_ZETA8_POWERS):
            if u_phase == u.conj_complex() * phase and minus_t_phase == -(
                t.conj_complex() * phase
            ):
                return l
        raise ValueError("the matrix has no phase that is a power of zeta8")

    def to_su2(self) -> SU2:
        """Return the element of SU(2) equal to this unitary up to a global phase."""
        l = self._phase_power()
        scale = pow_ui(sqrt2(), self.k) * zeta16() ** l
        u = self.mat[0][0].to_complex() / scale
        t = self.mat[1][0].to_complex() / scale
        return SU2.from_complex(u, t)

    def to_so3(self) -> SO3Droot2:
        """Return the rotation this unitary induces on the Pauli matrices."""
        dagger = _dagger(self.mat)
        zero, one, i = Zzeta8(), Zzeta8(1), Zzeta8(0, 0, 1, 0)
        paulis = (
            ((zero, one), (one, zero)),
            ((zero, -i), (i, zero)),
            ((one, zero), (zero, -one)),
        )
        conjugated = [
            tuple(
                tuple(e * 2 for e in row)
                for row in _matmul(_matmul(self.mat, p, zero), dagger, zero)
            )
            for p in paulis
        ]

        def trace_real(m: Matrix) -> Zroot2:
            trace = m[0][0] + m[1][1]
            return Zroot2(trace.a // 2, (trace.b - trace.d) // 4)

        mat = tuple(
            tuple(trace_real(_matmul(p, c, zero)) for c in conjugated) for p in paulis
        )
        return SO3Droot2(mat, 2 * self.k + 2)

    def __mul__(self, other: object) -> U2Dzeta8:
        if not isinstance(other, U2Dzeta8):
            return NotImplemented
        return U2Dzeta8(_matmul(self.mat, other.mat, Zzeta8()), self.k + other.k)


H_U2 = U2Dzeta8.from_column(Zzeta8(1), Zzeta8(1), 4, 1)
S_U2 = U2Dzeta8.from_column(Zzeta8(1), Zzeta8(0), 2, 0)
T_U2 = U2Dzeta8.from_column(Zzeta8(1), Zzeta8(0), 1, 0)

_H_SO3 = H_U2.to_so3()
_SINV_SO3 = S_U2.to_so3().transpose()
_TINV_SO3 = T_U2.to_so3().transpose()


def _so3(rows: list[list[int]]) -> Matrix:
    return tuple(tuple(Zroot2(e) for e in row) for row in rows)


_CLIFFORDS: list[tuple[str, Matrix]] = [
    ("", _so3([[1, 0, 0], [0, 1, 0], [0, 0, 1]])),
    ("S", _so3([[0, -1, 0], [1, 0, 0], [0, 0, 1]])),
    ("H", _so3([[0, 0, 1], [0, -1, 0], [1, 0, 0]])),
    ("SS", _so3([[-1, 0, 0], [0, -1, 0], [0, 0, 1]])),
    ("HS", _so3([[0, 0, 1], [-1, 0, 0], [0, -1, 0]])),
    ("SH", _so3([[0, 1, 0], [0, 0, 1], [1, 0, 0]])),
    ("SSS", _so3([[0, 1, 0], [-1, 0, 0], [0, 0, 1]])),
    ("HSS", _so3([[0, 0, 1], [0, 1, 0], [-1, 0, 0]])),
    ("SHS", _so3([[1, 0, 0], [0, 0, 1], [0, -1, 0]])),
    ("SSH", _so3([[0, 0, -1], [0, 1, 0], [1, 0, 0]])),
    ("HSH", _so3([[1, 0, 0], [0, 0, -1], [0, 1, 0]])),
    ("HSSS", _so3([[0, 0, 1], [1, 0, 0], [0, 1, 0]])),
    ("SHSS", _so3([[0, -1, 0], [0, 0, 1], [-1, 0, 0]])),
    ("SSHS", _so3([[0, 0, -1], [1, 0, 0], [0, -1, 0]])),
    ("HSHS", _so3([[0, -1, 0], [0, 0, -1], [1, 0, 0]])),
    ("HSSH", _so3([[1, 0, 0], [0, -1, 0], [0, 0, -1]])),
    ("SHSSS", _so3([[-1, 0, 0], [0, 0, 1], [0, 1, 0]])),
    ("SSHSS", _so3([[0, 0, -1], [0, -1, 0], [-1, 0, 0]])),
    ("HSHSS", _so3([[-1, 0, 0], [0, 0, -1], [0, -1, 0]])),
    ("HSSHS", _so3([[0, -1, 0], [-1, 0, 0], [0, 0, -1]])),
    ("SHSSH", _so3([[0, 1, 0], [1, 0, 0], [0, 0, -1]])),
    ("SSHSSS", _so3([[0, 0, -1], [-1, 0, 0], [0, 1, 0]])),
    ("HSHSSS", _so3([[0, 1, 0], [0, 0, -1], [-1, 0, 0]])),
    ("HSSHSS", _so3([[-1, 0, 0], [0, 1, 0], [0, 0, -1]])),
]


def synth(u: U2Dzeta8 | SO3Droot2) -> str:
    """Return a Clifford+T word, in normal form, for u up to global phase."""
    rotation = u.to_so3() if isinstance(u, U2Dzeta8) else u
    if not isinstance(rotation, SO3Droot2):
        raise TypeError(f"cannot synthesise {type(u).__name__}")

    sequence: list[str] = []
    while rotation.k > 0:
        parity = [[e.a & 1 for e in row] for row in rotation.mat]
        if not any(parity[2]):
            sequence.append("T")
            rotation = _TINV_SO3 * rotation
        elif not any(parity[0]):
            sequence.append("HT")
            rotation = _TINV_SO3 * _H_SO3 * rotation
        else:
            sequence.append("SHT")
            rotation = _TINV_SO3 * _H_SO3 * _SINV_SO3 * rotation

    sequence.extend(name for name, clifford in _CLIFFORDS if rotation.mat == clifford)
    return "".join(sequence)


def get_t_count(u: U2Dzeta8) -> int:
    """Return the minimal number of T gates needed for u."""
    return u.to_so3().k