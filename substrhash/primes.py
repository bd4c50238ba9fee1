from __future__ import annotations
import random

# Deterministic Miller-Rabin: testing against these witnesses is exact for every n < 3.3 * 10^24
# (https://oeis.org/A014233). Above that we fall back to random witnesses.
_DETERMINISTIC_WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)
_DETERMINISTIC_LIMIT = 3317044064679887385961981

_rng = random.Random()


def _witness(a: int, n: int) -> bool:
    """True if `a` proves that `n` is composite."""
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1
    x = pow(a, d, n)
    if x == 1 or x == n - 1:
        return False
    for _ in range(s - 1):
        x = x * x % n
        if x == n - 1:
            return False
    return True


def is_prime(n: int, rounds: int = 64) -> bool:
    """Miller-Rabin primality test.

    Exact below 3.3 * 10^24. For larger n it is probabilistic with Pr[composite reported prime] <= 4^{-rounds}.
    """
    if n < 2:
        return False
    for p in _DETERMINISTIC_WITNESSES:
        if n % p == 0:
            return n == p
    if n < _DETERMINISTIC_LIMIT:
        witnesses = _DETERMINISTIC_WITNESSES
    else:
        witnesses = [_rng.randrange(2, n - 1) for _ in range(rounds)]
    return not any(_witness(a, n) for a in witnesses)
