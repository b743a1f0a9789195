"""Primal-dual interior-point solver for block-diagonal semidefinite programs.

The primal problem is: minimise c.x subject to X = sum_i x_i F_i - F_0 >= 0.
The dual problem is: maximise <F_0, Y> subject to <F_i, Y> = c_i, Y >= 0.
"""

from __future__ import annotations

import operator
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Callable, Tuple, Union

import mpmath
from mpmath import mpf

from su2synth.linalg import cholesky as _cholesky_matrix
from su2synth.linalg import solve_system_spd
from su2synth.numeric import Status, epsilon
from su2synth.profiler import Profiler

Dense = Tuple[Tuple[mpf, ...], ...]
Diagonal = Tuple[mpf, ...]
Block = Union[Dense, Diagonal]


def _dot(xs: Sequence[mpf], ys: Sequence[mpf]) -> mpf:
    if not xs:
        return mpf(0)
    return mpmath.fdot(xs, ys)


def _matmul(a: Dense, b: Dense) -> Dense:
    columns = tuple(zip(*b))
    return tuple(tuple(_dot(row, col) for col in columns) for row in a)


def _is_scalar(value: object) -> bool:
    return isinstance(value, (int, float, mpf)) and not isinstance(value, bool)


def _to_tuple(m: mpmath.matrix) -> Dense:
    return tuple(tuple(m[i, j] for j in range(m.cols)) for i in range(m.rows))


def _to_mp(block: Dense) -> mpmath.matrix:
    return mpmath.matrix([list(row) for row in block])


def _parse_block(block: object) -> tuple[int, Block]:
    """Return (size, data); a negative size marks a diagonal block."""
    if isinstance(block, mpmath.matrix):
        if block.cols == 1:
            return -block.rows, tuple(mpf(block[i, 0]) for i in range(block.rows))
        rows = [[block[i, j] for j in range(block.cols)] for i in range(block.rows)]
    else:
        items = list(block)  # type: ignore[call-overload]
        if not items or not (
            isinstance(items[0], Sequence) and not isinstance(items[0], str)
        ):
            return -len(items), tuple(mpf(v) for v in items)
        rows = [list(row) for row in items]
    n = len(rows)
    if any(len(row) != n for row in rows):
        raise ValueError("a dense block must be square")
    return n, tuple(tuple(mpf(v) for v in row) for row in rows)


class BlockDiagonal:
    """A block-diagonal real matrix made of dense and diagonal blocks.

    A block given as a square nested sequence is dense; a flat sequence (or a
    one-column matrix) is the diagonal of a diagonal block. In ``sizes`` a
    diagonal block of order n appears as -n.
    """

    __slots__ = ("_sizes", "_blocks")

    def __init__(self, blocks: Iterable[object]) -> None:
        parsed = [_parse_block(block) for block in blocks]
        self._sizes: tuple[int, ...] = tuple(size for size, _ in parsed)
        self._blocks: tuple[Block, ...] = tuple(data for _, data in parsed)

    @classmethod
    def _make(cls, sizes: Iterable[int], blocks: Iterable[Block]) -> BlockDiagonal:
        obj = cls.__new__(cls)
        obj._sizes = tuple(sizes)
        obj._blocks = tuple(blocks)
        return obj

    @classmethod
    def zeros(cls, sizes: Iterable[int]) -> BlockDiagonal:
        sizes = tuple(sizes)
        blocks = [
            tuple(tuple(mpf(0) for _ in range(s)) for _ in range(s))
            if s > 0
            else tuple(mpf(0) for _ in range(-s))
            for s in sizes
        ]
        return cls._make(sizes, blocks)

    @classmethod
    def identity(cls, sizes: Iterable[int]) -> BlockDiagonal:
        sizes = tuple(sizes)
        blocks = [
            tuple(tuple(mpf(1 if i == j else 0) for j in range(s)) for i in range(s))
            if s > 0
            else tuple(mpf(1) for _ in range(-s))
            for s in sizes
        ]
        return cls._make(sizes, blocks)

    @property
    def sizes(self) -> tuple[int, ...]:
        return self._sizes

    @property
    def blocks(self) -> tuple[Block, ...]:
        return self._blocks

    def _entries(self) -> Iterator[mpf]:
        for size, block in zip(self._sizes, self._blocks):
            if size > 0:
                for row in block:
                    yield from row  # type: ignore[misc]
            else:
                yield from block  # type: ignore[misc]

    def _map(
        self, dense: Callable[[Dense], Block], diagonal: Callable[[Diagonal], Block]
    ) -> BlockDiagonal:
        return BlockDiagonal._make(
            self._sizes,
            (
                dense(block) if size > 0 else diagonal(block)  # type: ignore[arg-type]
                for size, block in zip(self._sizes, self._blocks)
            ),
        )

    def _check_same(self, other: BlockDiagonal) -> None:
        if self._sizes != other._sizes:
            raise ValueError(f"block sizes differ: {self._sizes} and {other._sizes}")

    def _zip(self, other: BlockDiagonal, op: Callable[[mpf, mpf], mpf]) -> BlockDiagonal:
        self._check_same(other)
        blocks: list[Block] = []
        for size, x, y in zip(self._sizes, self._blocks, other._blocks):
            if size > 0:
                blocks.append(
                    tuple(
                        tuple(op(p, q) for p, q in zip(rx, ry))
                        for rx, ry in zip(x, y)  # type: ignore[arg-type]
                    )
                )
            else:
                blocks.append(tuple(op(p, q) for p, q in zip(x, y)))  # type: ignore[arg-type]
        return BlockDiagonal._make(self._sizes, blocks)

    def _scale(self, s: mpf) -> BlockDiagonal:
        return self._map(
            lambda b: tuple(tuple(v * s for v in row) for row in b),
            lambda b: tuple(v * s for v in b),
        )

    def to_dense(self) -> mpmath.matrix:
        total = sum(abs(s) for s in self._sizes)
        result = mpmath.matrix(total, total)
        start = 0
        for size, block in zip(self._sizes, self._blocks):
            if size > 0:
                for i, row in enumerate(block):
                    for j, value in enumerate(row):  # type: ignore[arg-type]
                        result[start + i, start + j] = value
            else:
                for i, value in enumerate(block):
                    result[start + i, start + i] = value
            start += abs(size)
        return result

    def transpose(self) -> BlockDiagonal:
        return self._map(lambda b: tuple(zip(*b)), lambda b: b)

    def inverse(self) -> BlockDiagonal:
        return self._map(
            lambda b: _to_tuple(mpmath.inverse(_to_mp(b))),
            lambda b: tuple(1 / v for v in b),
        )

    def cholesky(self) -> BlockDiagonal:
        """Return the lower triangular factor L with self = L * L^T."""
        return self._map(
            lambda b: _to_tuple(_cholesky_matrix(_to_mp(b))),
            lambda b: tuple(mpmath.sqrt(v) for v in b),
        )

    def eigenvalues(self) -> list[mpf]:
        """Return all eigenvalues in ascending order; dense blocks must be symmetric."""
        values: list[mpf] = []
        for size, block in zip(self._sizes, self._blocks):
            if size > 0:
                e = mpmath.eigsy(_to_mp(block), eigvals_only=True)  # type: ignore[arg-type]
                values.extend(e[i] for i in range(e.rows))
            else:
                values.extend(block)  # type: ignore[arg-type]
        return sorted(values)

    def max_abs_coeff(self) -> mpf:
        return max((abs(v) for v in self._entries()), default=mpf(0))

    def __add__(self, other: object) -> BlockDiagonal:
        if not isinstance(other, BlockDiagonal):
            return NotImplemented
        return self._zip(other, operator.add)

    def __sub__(self, other: object) -> BlockDiagonal:
        if not isinstance(other, BlockDiagonal):
            return NotImplemented
        return self._zip(other, operator.sub)

    def __mul__(self, other: object) -> BlockDiagonal:
        if isinstance(other, BlockDiagonal):
            self._check_same(other)
            blocks: list[Block] = []
            for size, x, y in zip(self._sizes, self._blocks, other._blocks):
                if size > 0:
                    blocks.append(_matmul(x, y))  # type: ignore[arg-type]
                else:
                    blocks.append(tuple(p * q for p, q in zip(x, y)))  # type: ignore[arg-type]
            return BlockDiagonal._make(self._sizes, blocks)
        if _is_scalar(other):
            return self._scale(mpf(other))  # type: ignore[arg-type]
        return NotImplemented

    def __rmul__(self, other: object) -> BlockDiagonal:
        if _is_scalar(other):
            return self._scale(mpf(other))  # type: ignore[arg-type]
        return NotImplemented

    def __neg__(self) -> BlockDiagonal:
        return self._scale(mpf(-1))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockDiagonal):
            return NotImplemented
        return self._sizes == other._sizes and self._blocks == other._blocks

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BlockDiagonal(sizes={self._sizes})"


def hs_inner(a: BlockDiagonal, b: BlockDiagonal) -> mpf:
    """Return the Hilbert-Schmidt inner product sum_ij a_ij * b_ij."""
    a._check_same(b)
    return _dot(list(a._entries()), list(b._entries()))


@dataclass
class Options:
    """Solver parameters; lambda_ scales the initial point lambda_ * I."""

    max_iteration: int = 200
    lambda_: float = 1e4
    beta_star: float = 0.1
    beta_bar: float = 0.3
    gamma: float = 0.9
    epsilon1: float = 1e-30
    epsilon2: float = 1e-30
    output_history: bool = False


@dataclass
class Results:
    status: Status
    obj_primal: mpf
    obj_dual: mpf
    x: list[mpf]
    x_matrix: BlockDiagonal
    y_matrix: BlockDiagonal
    iterations: int


def _nonzeros(f: BlockDiagonal) -> list[tuple]:
    structure: list[tuple] = []
    for size, block in zip(f.sizes, f.blocks):
        if size > 0:
            structure.append(
                tuple(
                    (r, c, v)
                    for r, row in enumerate(block)
                    for c, v in enumerate(row)  # type: ignore[arg-type]
                    if v != 0
                )
            )
        else:
            structure.append(tuple((i, v) for i, v in enumerate(block) if v != 0))
    return structure


def _is_symmetric(block: Dense) -> bool:
    tol = 10 * epsilon()
    for i, row in enumerate(block):
        for j in range(i + 1, len(block)):
            scale = max(mpf(1), abs(row[j]), abs(block[j][i]))
            if abs(row[j] - block[j][i]) > tol * scale:
                return False
    return True


def _combine(
    base: BlockDiagonal, coefficients: Sequence[mpf], matrices: Sequence[BlockDiagonal]
) -> BlockDiagonal:
    result = base
    for coefficient, matrix in zip(coefficients, matrices):
        result = result + matrix * coefficient
    return result


def _accumulate(schur: list[list[mpf]], i: int, j: int, value: mpf) -> None:
    schur[i][j] += value
    if i != j:
        schur[j][i] += value


def _schur_complement(
    x_inv: BlockDiagonal,
    y_mat: BlockDiagonal,
    constraints: Sequence[BlockDiagonal],
    structure: Sequence[list[tuple]],
) -> list[list[mpf]]:
    """Return B_ij = sum over blocks of tr(X^-1 F_i Y F_j)."""
    m = len(constraints)
    schur = [[mpf(0)] * m for _ in range(m)]
    for l, (size, xinv_l, y_l) in enumerate(zip(x_inv.sizes, x_inv.blocks, y_mat.blocks)):
        if size > 0:
            for i, fi in enumerate(constraints):
                if not structure[i][l]:
                    continue
                left = _matmul(_matmul(xinv_l, fi.blocks[l]), y_l)  # type: ignore[arg-type]
                for j, entries in enumerate(structure[i:], start=i):
                    if entries[l]:
                        total = mpmath.fsum(left[r][c] * v for r, c, v in entries[l])
                        _accumulate(schur, i, j, total)
        else:
            weights = [p * q for p, q in zip(xinv_l, y_l)]  # type: ignore[arg-type]
            for i, entries_i in enumerate(structure):
                if not entries_i[l]:
                    continue
                scaled = {idx: v * weights[idx] for idx, v in entries_i[l]}
                for j, entries_j in enumerate(structure[i:], start=i):
                    terms = [scaled[idx] * v for idx, v in entries_j[l] if idx in scaled]
                    if terms:
                        _accumulate(schur, i, j, mpmath.fsum(terms))
    return schur


def _direction(
    x_inv: BlockDiagonal,
    y_mat: BlockDiagonal,
    rp: BlockDiagonal,
    rc: BlockDiagonal,
    d: Sequence[mpf],
    schur: list[list[mpf]],
    constraints: Sequence[BlockDiagonal],
) -> tuple[list[mpf], BlockDiagonal, BlockDiagonal]:
    right = x_inv * (rc - rp * y_mat)
    r = [-di + hs_inner(fi, right) for di, fi in zip(d, constraints)]
    solution = solve_system_spd(schur, r)
    dx = [solution[i] for i in range(len(r))]
    d_x = _combine(rp, dx, constraints)
    tilde = x_inv * (rc - d_x * y_mat)
    d_y = (tilde + tilde.transpose()) * mpf("0.5")
    return dx, d_x, d_y


def _step_length(m: BlockDiagonal, dm: BlockDiagonal) -> mpf:
    lower_inv = m.cholesky().inverse()
    scaled = lower_inv * dm * lower_inv.transpose()
    eigenvalues = scaled.eigenvalues()
    lambda_min = eigenvalues[0] if eigenvalues else mpf(0)
    if lambda_min >= 0:
        return mpf(1)
    return min(mpf(1), -1 / lambda_min)


def _relative_gap(primal: mpf, dual: mpf) -> mpf:
    return abs(primal - dual) / max(mpf(1), abs(primal) + abs(dual) / 2)


def _as_list(values: object) -> list[mpf]:
    if isinstance(values, mpmath.matrix):
        return [mpf(values[i]) for i in range(len(values))]
    return [mpf(v) for v in values]  # type: ignore[attr-defined]


def _f(value: mpf) -> float:
    return float(value)


def solve(
    c: object, f: Sequence[BlockDiagonal], options: Options | None = None
) -> Results:
    """Solve the SDP with costs c and data F_0, ..., F_m given as f."""
    if options is None:
        options = Options()
    f = list(f)
    if not f:
        raise ValueError("the constant term F_0 is required")
    costs = _as_list(c)
    if not costs:
        raise ValueError("at least one variable is required")
    if len(costs) + 1 != len(f):
        raise ValueError(f"expected {len(costs) + 1} data matrices, got {len(f)}")
    sizes = f[0].sizes
    for fi in f:
        if fi.sizes != sizes:
            raise ValueError("all data matrices must share the block structure")
        for size, block in zip(fi.sizes, fi.blocks):
            if size > 0 and not _is_symmetric(block):  # type: ignore[arg-type]
                raise ValueError("dense blocks must be symmetric")

    f0, constraints = f[0], f[1:]
    structure = [_nonzeros(fi) for fi in constraints]
    n = sum(abs(s) for s in sizes)
    identity = BlockDiagonal.identity(sizes)
    x_mat = identity * mpf(options.lambda_)
    y_mat = identity * mpf(options.lambda_)
    x = [mpf(0)] * len(costs)
    mu = hs_inner(x_mat, y_mat) / n
    eps1, eps2 = mpf(options.epsilon1), mpf(options.epsilon2)
    beta_star, beta_bar = mpf(options.beta_star), mpf(options.beta_bar)
    gamma = mpf(options.gamma)

    if options.output_history:
        print("-" * 73)
        print(" " * 29 + "SDP parameters" + " " * 30)
        print("-" * 73)
        print(
            f"{'      mu':>8}{'objP':>12}{'objD':>10}{'rgap':>10}"
            f"{'alphaP':>12}{'alphaD':>10}{'beta':>8}"
        )

    profiler = Profiler.instance()
    with profiler.section("sdp::solve"):
        iteration = 0
        while True:
            primal_obj = _dot(costs, x)
            dual_obj = hs_inner(f0, y_mat)
            primal_residual = _combine(x_mat + f0, [-xi for xi in x], constraints)
            dual_residual = max(
                abs(hs_inner(fi, y_mat) - ci) for ci, fi in zip(costs, constraints)
            )
            feasible = primal_residual.max_abs_coeff() < eps1 and dual_residual < eps1
            gap = _relative_gap(primal_obj, dual_obj)
            if feasible and gap < eps2:
                return Results(
                    Status.SUCCESS, primal_obj, dual_obj, x, x_mat, y_mat, iteration
                )
            if iteration > options.max_iteration:
                return Results(
                    Status.FAILURE, primal_obj, dual_obj, x, x_mat, y_mat, iteration
                )

            x_inv = x_mat.inverse()
            with profiler.section("sdp::solve compute B"):
                schur = _schur_complement(x_inv, y_mat, constraints, structure)

            rp = _combine(-x_mat - f0, x, constraints)
            d = [ci - hs_inner(fi, y_mat) for ci, fi in zip(costs, constraints)]
            xy = x_mat * y_mat

            beta_p = mpf(0) if feasible else beta_bar
            rc_p = identity * (beta_p * mu) - xy
            _, dx_p_mat, dy_p_mat = _direction(
                x_inv, y_mat, rp, rc_p, d, schur, constraints
            )
            alpha_p_pred = _step_length(x_mat, dx_p_mat)
            alpha_d_pred = _step_length(y_mat, dy_p_mat)

            beta = hs_inner(
                x_mat + dx_p_mat * alpha_p_pred, y_mat + dy_p_mat * alpha_d_pred
            ) / hs_inner(x_mat, y_mat)
            if beta <= 1:
                beta_c = max(beta_star if feasible else beta_bar, beta * beta)
            else:
                beta_c = mpf(1)

            rc = identity * (beta_c * mu) - xy - dx_p_mat * dy_p_mat
            dx, dx_mat, dy_mat = _direction(x_inv, y_mat, rp, rc, d, schur, constraints)
            alpha_p = _step_length(x_mat, dx_mat)
            alpha_d = _step_length(y_mat, dy_mat)

            if options.output_history:
                print(
                    f"{iteration:3d}  {_f(mu):8.1e}{_f(primal_obj):10.1e}"
                    f"{_f(dual_obj):10.1e}{_f(gap):10.1e}{_f(alpha_p):10.1e}"
                    f"{_f(alpha_d):10.1e}{_f(beta_c):10.1e}"
                )

            step_p = gamma * alpha_p
            step_d = gamma * alpha_d
            x = [xi + step_p * di for xi, di in zip(x, dx)]
            x_mat = x_mat + dx_mat * step_p
            y_mat = y_mat + dy_mat * step_d
            mu = hs_inner(x_mat, y_mat) / n
            iteration += 1