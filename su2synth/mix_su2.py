"""Optimal probabilistic mixing of SU(2) elements towards a target.

The mixing probabilities come from a semidefinite program posed on Choi
matrices written in the magic basis.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterator

import mpmath
from mpmath import mpc, mpf

from su2synth.numeric import inv_sqrt2
from su2synth.sdp import BlockDiagonal, Options, Results, solve
from su2synth.su2 import SU2

_SDP_PRECISION = 256

Rows = tuple[tuple[mpf, ...], ...]


def _as_matrix(u: object) -> mpmath.matrix:
    if isinstance(u, SU2):
        return u.to_matrix()
    return mpmath.matrix(u)


def choi_jamiolkowski(u: object) -> mpmath.matrix:
    """Return the normalised Choi matrix (1/d) |U>><<U| of a d x d unitary."""
    m = _as_matrix(u)
    dim = m.rows
    if m.cols != dim:
        raise ValueError("the unitary must be a square matrix")
    result = mpmath.matrix(dim * dim, dim * dim)
    for i, j, a, b in itertools.product(range(dim), repeat=4):
        result[i * dim + a, j * dim + b] = m[a, i] * mpmath.conj(m[b, j]) / dim
    return result


def _magic_basis() -> mpmath.matrix:
    s = inv_sqrt2()
    i_s = mpc(0, s)
    m = mpmath.matrix(4, 4)
    m[0, 0] = s
    m[0, 3] = s
    m[1, 0] = -i_s
    m[1, 3] = i_s
    m[2, 1] = -i_s
    m[2, 2] = -i_s
    m[3, 1] = s
    m[3, 2] = -s
    return m


def choi_jamiolkowski_magic_basis(u: object) -> mpmath.matrix:
    """Return the real part of the Choi matrix of a 2x2 unitary in the magic basis."""
    m = _as_matrix(u)
    if (m.rows, m.cols) != (2, 2):
        raise ValueError("the unitary must be a 2x2 matrix")
    basis = _magic_basis()
    cj = basis * choi_jamiolkowski(m) * basis.H
    return mpmath.matrix([[mpmath.re(cj[i, j]) for j in range(4)] for i in range(4)])


def _symmetric_rows(m: mpmath.matrix) -> Rows:
    n = m.rows
    return tuple(tuple((m[i, j] + m[j, i]) / 2 for j in range(n)) for i in range(n))


def _zero_rows(n: int) -> Rows:
    return tuple(tuple(mpf(0) for _ in range(n)) for _ in range(n))


def _symmetric_basis() -> Iterator[Rows]:
    """Yield the ten unit symmetric 4x4 matrices: diagonal ones first."""
    pairs = [(i, i) for i in range(4)] + list(itertools.combinations(range(4), 2))
    for i, j in pairs:
        yield tuple(
            tuple(mpf(1) if {r, c} == {i, j} else mpf(0) for c in range(4))
            for r in range(4)
        )


@dataclass
class MixSU2:
    """A set of available unitaries together with mixing probabilities."""

    available_u: list[SU2] = field(default_factory=list)
    prob: list[mpf] = field(default_factory=list)

    def compute_optimal_prob(
        self, target: SU2, options: Options | None = None
    ) -> Results:
        """Solve for the mixture of the available unitaries closest to target.

        The first ten entries of the solution vector parametrise a symmetric
        4x4 matrix S; the remaining entries are the probabilities, in the
        order of ``available_u``. The objective value is tr(S) / 2.
        """
        if not self.available_u:
            raise ValueError("at least one available unitary is required")
        with mpmath.workprec(_SDP_PRECISION):
            n = len(self.available_u)
            candidates = [
                _symmetric_rows(choi_jamiolkowski_magic_basis(u)) for u in self.available_u
            ]
            target_rows = _symmetric_rows(choi_jamiolkowski_magic_basis(target))
            zero4 = _zero_rows(4)
            zeros_n = [mpf(0)] * n

            f = [BlockDiagonal([zero4, target_rows, zeros_n, [mpf(-1)]])]
            f.extend(
                BlockDiagonal([s, s, zeros_n, [mpf(0)]]) for s in _symmetric_basis()
            )
            f.extend(
                BlockDiagonal(
                    [
                        zero4,
                        candidate,
                        [mpf(1) if j == i else mpf(0) for j in range(n)],
                        [mpf(-1)],
                    ]
                )
                for i, candidate in enumerate(candidates)
            )
            costs = [mpf("0.5")] * 4 + [mpf(0)] * (6 + n)
            return solve(costs, f, options)