import mpmath
import pytest
from mpmath import mpf

from su2synth.numeric import (
    ceil_to_int,
    digits10,
    epsilon,
    floor_to_int,
    get_precision,
    inv_sqrt2,
    pi,
    pow_ui,
    round_to_int,
    set_precision,
    sqrt2,
    zeta8,
    zeta16,
)


@pytest.fixture(autouse=True)
def restore_precision():
    saved = get_precision()
    yield
    set_precision(saved)


def test_set_precision_round_trip():
    set_precision(256)
    assert get_precision() == 256


def test_set_precision_rejects_too_small():
    with pytest.raises(ValueError):
        set_precision(1)


def test_epsilon_matches_precision():
    set_precision(100)
    assert epsilon() * mpf(2) ** 100 == 1


def test_digits10_at_256_bits():
    set_precision(256)
    assert digits10() == 77


def test_sqrt2_and_inverse():
    set_precision(256)
    assert abs(sqrt2() * inv_sqrt2() - 1) < 10 * epsilon()
    assert abs(sqrt2() * sqrt2() - 2) < 10 * epsilon()


def test_zeta8_is_eighth_root_of_unity():
    set_precision(256)
    assert abs(pow_ui(zeta8(), 8) - 1) < 100 * epsilon()
    assert abs(pow_ui(zeta8(), 4) + 1) < 100 * epsilon()


def test_zeta16_squared_is_zeta8():
    set_precision(256)
    assert abs(zeta16() * zeta16() - zeta8()) < 100 * epsilon()


def test_pi_is_root_of_sine():
    set_precision(256)
    assert abs(mpmath.sin(pi())) < 10 * epsilon()


def test_round_ties_to_even():
    for n in range(-3, 4):
        r = round_to_int(mpf(n) + mpf("0.5"))
        assert r in (n, n + 1)
        assert r % 2 == 0


def test_round_of_integers_is_identity():
    for n in range(-5, 6):
        assert round_to_int(mpf(n)) == n
        assert floor_to_int(mpf(n)) == n
        assert ceil_to_int(mpf(n)) == n


def test_floor_and_ceil_bracket_value():
    for text in ("-7.25", "3.75", "-0.5", "0.125"):
        x = mpf(text)
        f = floor_to_int(x)
        c = ceil_to_int(x)
        assert f <= x < f + 1
        assert c - 1 < x <= c
        assert c - f == 1


def test_rounding_non_finite_raises():
    with pytest.raises(ValueError):
        round_to_int(mpmath.inf)
    with pytest.raises(ValueError):
        floor_to_int(mpmath.nan)


def test_pow_ui_matches_builtin_power_for_ints():
    for base in (-3, 2, 7):
        for n in range(0, 10):
            assert pow_ui(base, n) == base**n


def test_pow_ui_exact_for_small_reals():
    assert pow_ui(mpf(3), 5) == mpf(3) ** 5
    assert pow_ui(mpf(3), 0) == 1


def test_pow_ui_rejects_negative_exponent():
    with pytest.raises(ValueError):
        pow_ui(2, -1)