"""Approximate Clifford+T synthesis of SU(2) elements by lattice enumeration."""

from __future__ import annotations

import itertools
from typing import Iterator

import mpmath
from mpmath import mpf

from su2synth.exact_synth import U2Dzeta8, get_t_count
from su2synth.exact_synth import synth as exact_synth
from su2synth.lattice import enum_integer_points
from su2synth.numeric import inv_sqrt2, pow_ui, round_to_int, sqrt2, zeta16
from su2synth.profiler import Profiler
from su2synth.su2 import SU2, distance
from su2synth.zroot2 import Zroot2
from su2synth.zzeta8j import Zzeta8j


def synth(v: SU2, eps: object) -> str:
    """Return a Clifford+T word of minimal T-count within distance eps of v.

    Any eps of one or more gives the empty word.
    """
    eps_value = mpf(eps)
    if eps_value >= 1:
        return ""
    if eps_value <= 0:
        raise ValueError("eps must be positive")
    _, exponent = mpmath.frexp(eps_value)
    precision = max(53, -8 * int(exponent))
    with mpmath.workprec(precision):
        for t in itertools.count():
            found = fixed_t_synth(v, eps_value, t)
            if found:
                return exact_synth(found[0])
    raise AssertionError("unreachable")


def _words(length: int, prefix: str = "") -> Iterator[str]:
    for mask in range(1 << length):
        yield prefix + "".join("HT" if mask >> j & 1 else "SHT" for j in range(length))


def fixed_t_synth(v: SU2, eps: object, t: int) -> list[U2Dzeta8]:
    """Return the exact unitaries of T-count t within distance eps of v."""
    eps_value = mpf(eps)
    if not 0 < eps_value < 1:
        raise ValueError("eps must lie strictly between 0 and 1")
    if t < 0:
        raise ValueError("the T-count must be non-negative")

    v_prime = v * SU2.from_complex(zeta16(), 0)
    t_prime = max(0, round_to_int(t + mpf(5) / 2 * mpmath.log(eps_value, 2)))

    words = list(_words(t_prime))
    if t_prime >= 1:
        words.extend(_words(t_prime - 1, "T"))

    results: list[U2Dzeta8] = []
    for word in words:
        left = U2Dzeta8.from_sequence(word)
        left_dagger = left.adjoint().to_su2()
        if (t - t_prime) % 2 == 0:
            k, phase, target = (t - t_prime + 2) // 2, 0, v
        else:
            k, phase, target = (t - t_prime + 3) // 2, 1, v_prime
        for right in solve_approx_lattice(left_dagger * target, eps_value, k):
            candidate = left * U2Dzeta8.from_zzeta8j(right, phase, k)
            if get_t_count(candidate) == t:
                results.append(candidate)
    return results


def solve_approx_lattice(v: SU2, eps: object, k: int) -> list[Zzeta8j]:
    """Return every q in Z[zeta8, j] with norm 2**k whose unitary is eps-close to v."""
    eps_value = mpf(eps)
    with Profiler.instance().section("SolveApproxLattice"):
        r = pow_ui(sqrt2(), k)
        h = inv_sqrt2()
        sigma = mpmath.matrix(
            [
                [1, h, 0, -h, 0, 0, 0, 0],
                [0, h, 1, h, 0, 0, 0, 0],
                [0, 0, 0, 0, 1, h, 0, -h],
                [0, 0, 0, 0, 0, h, 1, h],
                [1, -h, 0, h, 0, 0, 0, 0],
                [0, -h, 1, -h, 0, 0, 0, 0],
                [0, 0, 0, 0, 1, -h, 0, h],
                [0, 0, 0, 0, 0, -h, 1, -h],
            ]
        )
        sigma_inv = sigma.T * mpf("0.5")
        a, b, c, d = v.a, v.b, v.c, v.d
        rotation = mpmath.matrix(
            [
                [a, -b, -c, -d, 0, 0, 0, 0],
                [b, a, d, -c, 0, 0, 0, 0],
                [c, -d, a, b, 0, 0, 0, 0],
                [d, c, -b, a, 0, 0, 0, 0],
                [0, 0, 0, 0, 1, 0, 0, 0],
                [0, 0, 0, 0, 0, 1, 0, 0],
                [0, 0, 0, 0, 0, 0, 1, 0],
                [0, 0, 0, 0, 0, 0, 0, 1],
            ]
        )

        root = mpmath.sqrt(1 - eps_value * eps_value)
        e1 = (r * (1 - root)) ** 2
        e2 = (r * eps_value) ** 2
        e3 = r * r
        scales = [1 / e1, 1 / e2, 1 / e2, 1 / e2] + [1 / e3] * 4
        shape = mpmath.diag([s / 2 for s in scales])
        q = sigma.T * rotation * shape * rotation.T * sigma
        centre = sigma_inv * rotation * mpmath.matrix([r * root] + [0] * 7)

        key = Zroot2(1 << k)
        solutions: list[Zzeta8j] = []
        for point in enum_integer_points(q, centre, 1):
            candidate = Zzeta8j.from_ints(*point)
            if candidate.norm_quaternion() != key:
                continue
            unitary = SU2.from_complex(
                candidate.u.to_complex(), candidate.t.to_complex()
            ).unitalize()
            if distance(unitary, v) < eps_value:
                solutions.append(candidate)
        return solutions