"""Dense real linear algebra at working precision."""

from __future__ import annotations

from typing import Sequence

import mpmath
from mpmath import mpf


def _dot(xs: Sequence[mpf], ys: Sequence[mpf]) -> mpf:
    if not xs:
        return mpf(0)
    return mpmath.fdot(xs, ys)


def _rows(a: object) -> list[list[mpf]]:
    m = mpmath.matrix(a)
    return [[m[i, j] for j in range(m.cols)] for i in range(m.rows)]


def _square_rows(a: object) -> list[list[mpf]]:
    rows = _rows(a)
    if any(len(row) != len(rows) for row in rows):
        raise ValueError("matrix must be square")
    return rows


def _from_columns(columns: list[list[mpf]], n_rows: int) -> mpmath.matrix:
    result = mpmath.matrix(n_rows, len(columns))
    for j, column in enumerate(columns):
        for i, value in enumerate(column):
            result[i, j] = value
    return result


def _cholesky_rows(rows: list[list[mpf]]) -> list[list[mpf]]:
    n = len(rows)
    lower = [[mpf(0)] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1):
            partial = _dot(lower[i][:j], lower[j][:j])
            if i == j:
                value = rows[i][i] - partial
                if value <= 0:
                    raise ValueError("matrix is not positive definite")
                lower[i][i] = mpmath.sqrt(value)
            else:
                lower[i][j] = (rows[i][j] - partial) / lower[j][j]
    return lower


def _solve_factored(lower: list[list[mpf]], b: Sequence[mpf]) -> list[mpf]:
    n = len(lower)
    y: list[mpf] = []
    for i, row in enumerate(lower):
        y.append((b[i] - _dot(row[:i], y)) / row[i])
    x = [mpf(0)] * n
    for i in reversed(range(n)):
        upper = [lower[j][i] for j in range(i + 1, n)]
        x[i] = (y[i] - _dot(upper, x[i + 1 :])) / lower[i][i]
    return x


def gso(b: object) -> mpmath.matrix:
    """Gram-Schmidt orthogonalise the columns of b, without normalising."""
    m = mpmath.matrix(b)
    columns = [[m[i, j] for i in range(m.rows)] for j in range(m.cols)]
    orthogonal: list[list[mpf]] = []
    for column in columns:
        vector = list(column)
        for w in orthogonal:
            mu = _dot(column, w) / _dot(w, w)
            vector = [v - mu * wi for v, wi in zip(vector, w)]
        orthogonal.append(vector)
    return _from_columns(orthogonal, m.rows)


def cholesky(a: object) -> mpmath.matrix:
    """Return the lower triangular L with a = L * L^T."""
    return mpmath.matrix(_cholesky_rows(_square_rows(a)))


def solve_system_spd(a: object, b: object) -> mpmath.matrix:
    """Solve a x = b for symmetric positive definite a; x is a column."""
    rows = _square_rows(a)
    rhs = mpmath.matrix(b)
    values = [rhs[i] for i in range(len(rhs))]
    if len(values) != len(rows):
        raise ValueError("right-hand side does not match the matrix size")
    return mpmath.matrix(_solve_factored(_cholesky_rows(rows), values))


def inverse_spd(a: object) -> mpmath.matrix:
    """Invert a symmetric positive definite matrix."""
    rows = _square_rows(a)
    n = len(rows)
    lower = _cholesky_rows(rows)
    columns = [
        _solve_factored(lower, [mpf(1) if i == k else mpf(0) for i in range(n)])
        for k in range(n)
    ]
    return _from_columns(columns, n)