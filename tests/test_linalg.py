import random

import mpmath
import pytest
from mpmath import mpf

from su2synth.linalg import cholesky, gso, inverse_spd, solve_system_spd
from su2synth.numeric import get_precision, set_precision


@pytest.fixture
def precision_256():
    saved = get_precision()
    set_precision(256)
    yield
    set_precision(saved)


def _random_matrix(rows, cols, seed):
    rng = random.Random(seed)
    return mpmath.matrix([[mpf(rng.uniform(-1, 1)) for _ in range(cols)] for _ in range(rows)])


def _random_spd(n, seed):
    a = _random_matrix(n, n, seed)
    return a.T * a


TOL = mpf(2) ** -200


def test_gso(precision_256):
    n = 10
    b = _random_matrix(n, n, 1)
    b_orth = gso(b)
    d = b_orth.T * b_orth
    for i in range(n):
        for j in range(n):
            if i != j:
                assert abs(d[i, j]) <= TOL * mpmath.sqrt(d[i, i] * d[j, j])
    det_b = mpmath.det(b)
    assert abs(det_b - mpmath.det(b_orth)) <= TOL * abs(det_b)


def test_cholesky(precision_256):
    a = _random_spd(50, 2)
    lower = cholesky(a)
    assert mpmath.mnorm(a - lower * lower.T, "f") <= TOL * mpmath.mnorm(a, "f")
    assert all(lower[i, j] == 0 for i in range(50) for j in range(i + 1, 50))


def test_solve_system_spd(precision_256):
    a = _random_spd(50, 3)
    rng = random.Random(4)
    b = mpmath.matrix([mpf(rng.uniform(-1, 1)) for _ in range(50)])
    x = solve_system_spd(a, b)
    assert mpmath.mnorm(a * x - b, "f") <= TOL * mpmath.mnorm(b, "f")


def test_inverse_spd(precision_256):
    a = _random_spd(50, 5)
    a_inv = inverse_spd(a)
    identity = mpmath.eye(50)
    assert mpmath.mnorm(identity - a * a_inv, "f") <= TOL * mpmath.mnorm(identity, "f")


def test_small_known_values():
    a = [[4, 2], [2, 3]]
    lower = cholesky(a)
    assert lower[0, 0] == 2
    assert lower[0, 1] == 0
    assert lower[1, 0] == 1
    assert abs(lower[1, 1] - mpmath.sqrt(2)) < mpf(10) ** -14
    x = solve_system_spd(a, [2, 1])
    assert abs(x[0] - mpf("0.5")) < mpf(10) ** -14
    assert abs(x[1]) < mpf(10) ** -14
    inv = inverse_spd(a)
    expected = [[mpf(3) / 8, mpf(-2) / 8], [mpf(-2) / 8, mpf(4) / 8]]
    for i in range(2):
        for j in range(2):
            assert abs(inv[i, j] - expected[i][j]) < mpf(10) ** -14


def test_gso_known_values():
    result = gso([[1, 1], [0, 1]])
    assert (result[0, 0], result[1, 0]) == (1, 0)
    assert (result[0, 1], result[1, 1]) == (0, 1)


def test_not_positive_definite_raises():
    with pytest.raises(ValueError):
        cholesky([[1, 2], [2, 1]])


def test_non_square_raises():
    with pytest.raises(ValueError):
        cholesky([[1, 2, 3], [4, 5, 6]])


def test_mismatched_rhs_raises():
    with pytest.raises(ValueError):
        solve_system_spd([[2, 0], [0, 2]], [1, 2, 3])