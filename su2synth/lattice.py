"""LLL basis reduction and enumeration of integer points in ellipsoids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import mpmath
from mpmath import mpf

from su2synth.linalg import cholesky, gso, inverse_spd
from su2synth.numeric import ceil_to_int, floor_to_int, round_to_int
from su2synth.profiler import Profiler

IntMatrix = list[list[int]]


def _dot(xs: Sequence[mpf], ys: Sequence[mpf]) -> mpf:
    if not xs:
        return mpf(0)
    return mpmath.fdot(xs, ys)


def _columns(m: mpmath.matrix) -> list[list[mpf]]:
    return [[m[i, j] for i in range(m.rows)] for j in range(m.cols)]


def _rows(m: mpmath.matrix) -> list[list[mpf]]:
    return [[m[i, j] for j in range(m.cols)] for i in range(m.rows)]


def _transpose(m: IntMatrix) -> IntMatrix:
    return [list(column) for column in zip(*m)]


def _identity(n: int) -> IntMatrix:
    return [[1 if i == j else 0 for j in range(n)] for i in range(n)]


def lll(b: object, delta: object) -> tuple[IntMatrix, IntMatrix]:
    """LLL-reduce the columns of b with parameter delta (0.25 < delta < 1).

    Returns (U, U_inv): a unimodular integer matrix U, as a list of rows,
    such that b * U is an LLL-reduced basis, and its inverse.
    """
    with Profiler.instance().section("LLL"):
        return _lll(mpmath.matrix(b), mpf(delta))


def _lll(basis: mpmath.matrix, delta: mpf) -> tuple[IntMatrix, IntMatrix]:
    n = basis.cols
    columns = _columns(basis)
    orthogonal = _columns(gso(basis))
    norm2 = [_dot(w, w) for w in orthogonal]
    mu = [[_dot(column, w) / nw for w, nw in zip(orthogonal, norm2)] for column in columns]

    u = _identity(n)
    u_inv = _identity(n)

    k = 1
    while k < n:
        for j in range(k - 1, -1, -1):
            if abs(mu[k][j]) > 0.5:
                q = round_to_int(mu[k][j])
                for row in u:
                    row[k] -= q * row[j]
                u_inv[j] = [x + q * y for x, y in zip(u_inv[j], u_inv[k])]
                for l in range(j + 1):
                    mu[k][l] -= q * mu[j][l]

        if norm2[k] >= (delta - mu[k][k - 1] * mu[k][k - 1]) * norm2[k - 1]:
            k += 1
            continue

        for row in u:
            row[k - 1], row[k] = row[k], row[k - 1]
        u_inv[k - 1], u_inv[k] = u_inv[k], u_inv[k - 1]

        mu_prime = mu[k][k - 1]
        new_norm2 = norm2[k] + mu_prime * mu_prime * norm2[k - 1]
        mu[k][k - 1] = mu_prime * norm2[k - 1] / new_norm2
        norm2[k] = norm2[k] * norm2[k - 1] / new_norm2
        norm2[k - 1] = new_norm2

        for j in range(k - 1):
            mu[k - 1][j], mu[k][j] = mu[k][j], mu[k - 1][j]

        for j in range(k + 1, n):
            t = mu[j][k]
            mu[j][k] = mu[j][k - 1] - mu_prime * t
            mu[j][k - 1] = t + mu[k][k - 1] * mu[j][k]

        k = max(k - 1, 1)

    return u, u_inv


@dataclass(frozen=True)
class _Level:
    """Reduced data for the trailing sub-block of one size."""

    q00: mpf
    q_inv00: mpf
    u_real: list[list[mpf]]
    u_inv: IntMatrix
    a_invb: list[mpf]
    schur_term: mpf


def _prepare_levels(q: mpmath.matrix) -> dict[int, _Level]:
    n = q.rows
    levels: dict[int, _Level] = {}
    current = q
    for size in range(n, 0, -1):
        if size < n:
            current = mpmath.matrix(
                [[current[i, j] for j in range(1, size + 1)] for i in range(1, size + 1)]
            )
        q_inv = inverse_spd(current)
        u_t, u_t_inv = lll(cholesky(q_inv).T, mpf("0.75"))
        u = _transpose(u_t)
        u_inv = _transpose(u_t_inv)
        u_real = mpmath.matrix(u)
        u_inv_real = mpmath.matrix(u_inv)

        current = u_inv_real.T * current * u_inv_real
        q_inv = u_real * q_inv * u_real.T

        if size > 1:
            block = mpmath.matrix(
                [[current[i, j] for j in range(1, size)] for i in range(1, size)]
            )
            col_tail = [current[i, 0] for i in range(1, size)]
            product = inverse_spd(block) * mpmath.matrix(col_tail)
            a_invb = [product[i] for i in range(size - 1)]
        else:
            col_tail = []
            a_invb = []

        levels[size] = _Level(
            q00=current[0, 0],
            q_inv00=q_inv[0, 0],
            u_real=_rows(u_real),
            u_inv=u_inv,
            a_invb=a_invb,
            schur_term=_dot(col_tail, a_invb),
        )
    return levels


def _x0_range(center: mpf, q_inv00: mpf, c: mpf) -> range:
    delta = mpmath.sqrt(q_inv00 * c)
    return range(ceil_to_int(center - delta), floor_to_int(center + delta) + 1)


def _enumerate(
    levels: dict[int, _Level], size: int, p: list[mpf], c: mpf
) -> Iterator[tuple[int, ...]]:
    if c < 0:
        return
    level = levels[size]
    if size == 1:
        for x0 in _x0_range(p[0], level.q_inv00, c):
            yield (x0,)
        return

    p = [_dot(row, p) for row in level.u_real]
    for x0 in _x0_range(p[0], level.q_inv00, c):
        d0 = mpf(x0) - p[0]
        next_p = [pi - d0 * ai for pi, ai in zip(p[1:], level.a_invb)]
        next_c = c - level.q00 * d0 * d0 + d0 * d0 * level.schur_term
        for tail in _enumerate(levels, size - 1, next_p, next_c):
            y = (x0, *tail)
            yield tuple(sum(a * b for a, b in zip(row, y)) for row in level.u_inv)


def enum_integer_points(q: object, p: object, c: object) -> list[tuple[int, ...]]:
    """Return every integer x with (x - p)^T q (x - p) <= c.

    q must be symmetric positive definite; p is the centre.
    """
    q_matrix = mpmath.matrix(q)
    n = q_matrix.rows
    if n == 0 or q_matrix.cols != n:
        raise ValueError("q must be a non-empty square matrix")
    p_matrix = mpmath.matrix(p)
    centre = [p_matrix[i] for i in range(len(p_matrix))]
    if len(centre) != n:
        raise ValueError("the centre does not match the size of q")

    with Profiler.instance().section("EnumIntegerPoints"):
        levels = _prepare_levels(q_matrix)
        return list(_enumerate(levels, n, centre, mpf(c)))