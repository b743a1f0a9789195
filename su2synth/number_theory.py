"""Modular exponentiation and probabilistic primality testing."""

from __future__ import annotations

import random

_rng = random.SystemRandom()


def pow_mod(x: int, y: int, mod: int) -> int:
    """Return x**y modulo mod; a non-positive exponent gives 1."""
    if y <= 0:
        return 1
    return pow(x, y, mod)


def is_prime(n: int, k: int = 20) -> bool:
    """Miller-Rabin test with k random bases; composites pass with chance below 4**-k."""
    if n < 2:
        return False
    if n in (2, 3):
        return True
    if n % 2 == 0:
        return False

    d = n - 1
    s = 0
    while d % 2 == 0:
        d >>= 1
        s += 1

    for _ in range(k):
        a = _rng.randrange(2, n - 2)
        x = pow_mod(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(1, s):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True