import pytest

from su2synth.numeric import epsilon, get_precision, set_precision
from su2synth.zroot2 import Zroot2
from su2synth.zzeta8 import Zzeta8

X = Zzeta8(8518, 3094, -8684, -5115)
Y = Zzeta8(-3113, 8658, 5655, 3751)


@pytest.fixture
def high_precision():
    saved = get_precision()
    set_precision(256)
    yield
    set_precision(saved)


def _close(val1, val2):
    return abs(val1 - val2) < min(abs(val1), abs(val2)) * epsilon() * 10


def test_add(high_precision):
    assert _close((X + Y).to_complex(), X.to_complex() + Y.to_complex())


def test_sub(high_precision):
    assert _close((X - Y).to_complex(), X.to_complex() - Y.to_complex())


def test_mul(high_precision):
    y = Zzeta8(0, 0, 1, 0)
    assert _close((X * y).to_complex(), X.to_complex() * y.to_complex())


def test_div():
    x = Zzeta8(851, 309, -868, -511)
    y = Zzeta8(-311, 865, 565, 375)
    z = x * y
    assert z.divisible(x)
    assert z.divisible(y)
    assert z / x == y
    assert z / y == x


def test_documented_product():
    u = Zzeta8(1, 0, 1, 0)
    v = Zzeta8(0, 1, 0, -1)
    assert u * v == Zzeta8(0, 2, 0, 0)


def test_from_zroot2_matches_real_value(high_precision):
    r = Zroot2(7, -3)
    z = Zzeta8.from_zroot2(r).to_complex()
    assert abs(z.real - r.to_real()) < 100 * epsilon()
    assert abs(z.imag) < 100 * epsilon()


def test_norm_complex_is_modulus_squared(high_precision):
    x = Zzeta8(851, 309, -868, -511)
    assert abs(x.norm_complex().to_real() - abs(x.to_complex()) ** 2) < 1e-60
    assert x * x.conj_complex() == Zzeta8.from_zroot2(x.norm_complex())


def test_conjugations_are_involutions():
    assert X.conj_complex().conj_complex() == X
    assert X.conj_sqrt2().conj_sqrt2() == X


def test_mixed_arithmetic():
    r = Zroot2(2, 1)
    assert X + r == X + Zzeta8.from_zroot2(r)
    assert r + X == X + r
    assert 3 * X == X + X + X
    assert X - X == Zzeta8()
    assert 1 - X == -(X - 1)


def test_divide_by_zroot2():
    r = Zroot2(1, 1)
    product = X * r
    assert product.divisible(r)
    assert product / r == X


def test_not_divisible_raises():
    assert not Zzeta8(1).divisible(2)
    with pytest.raises(ArithmeticError):
        Zzeta8(1) / 2
    with pytest.raises(ArithmeticError):
        Zzeta8(1) / Zzeta8(0, 1, 0, 1)


def test_str():
    assert str(Zzeta8(1, -2, 3, -4)) == "(1, -2, 3, -4)"