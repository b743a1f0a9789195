import mpmath
import pytest
from mpmath import mpc

from su2synth.numeric import epsilon, get_precision, set_precision
from su2synth.su2 import SU2, distance, random_unitary, set_random_unitary_seed


@pytest.fixture
def precision_256():
    saved = get_precision()
    set_precision(256)
    yield
    set_precision(saved)


def test_mul_matches_matrix_product(precision_256):
    u = random_unitary(1234)
    v = random_unitary(5678)
    expected = u.to_matrix() * v.to_matrix()
    got = (u * v).to_matrix()
    diff = mpmath.mnorm(expected - got, "f")
    assert diff <= epsilon() * 100 * mpmath.mnorm(expected, "f")


def test_is_unitary():
    u = SU2(100, 200, 300, 400)
    assert not u.is_unitary()
    assert u.unitalize().is_unitary()


def test_random_unitary_is_unitary_and_reproducible(precision_256):
    u = random_unitary(42)
    assert u.is_unitary()
    assert random_unitary(42) == u


def test_shared_seed_is_reproducible():
    set_random_unitary_seed(1234)
    first = [random_unitary() for _ in range(3)]
    set_random_unitary_seed(1234)
    second = [random_unitary() for _ in range(3)]
    assert first == second


def test_adjoint_is_inverse(precision_256):
    u = random_unitary(7)
    product = u * u.adjoint()
    assert abs(product.a - 1) < epsilon() * 100
    assert max(abs(product.b), abs(product.c), abs(product.d)) < epsilon() * 100


def test_distance_values(precision_256):
    u = random_unitary(11)
    assert distance(u, u) < mpmath.mpf(10) ** -30
    assert distance(SU2(), SU2(0, 1, 0, 0)) == 1


def test_from_complex_and_trace():
    u = SU2.from_complex(mpc(0.5, 0.25), mpc(-1, 2))
    assert (u.a, u.b, u.c, u.d) == (0.5, 0.25, -1, 2)
    assert u.trace() == 1
    assert u.determinant() == 0.25 + 0.0625 + 1 + 4


def test_to_matrix_layout():
    m = SU2(1, 2, 3, 4).to_matrix()
    assert m[0, 0] == mpc(1, 2)
    assert m[0, 1] == mpc(-3, 4)
    assert m[1, 0] == mpc(3, 4)
    assert m[1, 1] == mpc(1, -2)


def test_str():
    assert str(SU2(1, 0, 0, 0)) == "(1.0, 0.0, 0.0, 0.0)"