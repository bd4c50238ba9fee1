from __future__ import annotations
import logging
import numbers
import operator
import secrets
import threading
import time
from typing import Iterable, Optional, Sequence, Union

logger = logging.getLogger(__name__)

# Python's own hash(int) is the identity (mod 2^61 - 1), so a dict keyed by fingerprint residues can be pushed
# into O(n^2) by anyone who picks the inputs. Everything here mixes through splitmix64 with a per-process seed.
# None of this is cryptographic.

_MASK64 = 0xFFFFFFFFFFFFFFFF
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_COMBINE_CONSTANT = 0x9E3779B9  # same constant boost::hash_combine uses

_seed: Optional[int] = None
_seed_lock = threading.Lock()


def splitmix64(x: int) -> int:
    """Unseeded splitmix64 finalizer: every output bit depends on every input bit."""
    x = (x + _GOLDEN_GAMMA) & _MASK64
    x = ((x ^ (x >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    x = ((x ^ (x >> 27)) * 0x94D049BB133111EB) & _MASK64
    return x ^ (x >> 31)


def process_seed() -> int:
    """Random 64-bit seed, drawn on first use and then fixed for the lifetime of the process."""
    global _seed
    if _seed is None:
        with _seed_lock:
            if _seed is None:
                _seed = (secrets.randbits(64) ^ time.monotonic_ns()) & _MASK64
                logger.debug("initialised hash-combination seed")
    return _seed


def combine_scalar(x: int) -> int:
    x = operator.index(x)  # numpy ints would overflow when added to the seed
    return splitmix64((x + process_seed()) & _MASK64)


def combine_pair(x: int, y: int) -> int:
    """Order-sensitive: combine_pair(x, y) and combine_pair(y, x) differ for almost every x != y."""
    return (combine_scalar(x) ^ (combine_scalar(y) << 1)) & _MASK64


def combine_sequence(xs: Iterable[int]) -> int:
    """Fold the mixed values of `xs` left to right, boost::hash_combine style.

    Not a sum, so permutations of the same values end up in different buckets.
    """
    h = 0
    for x in xs:
        h ^= (combine_scalar(x) + _COMBINE_CONSTANT + (h << 6) + (h >> 2)) & _MASK64
    return h


class MixedKey:
    """Hashable wrapper for an int, a pair of ints or a sequence of ints.

    Use it as the key of a dict/set fed with adversarial integers: equality is the equality of the wrapped
    values, the hash goes through the combiners above.
    """

    __slots__ = ("value", "_hash")

    def __init__(self, value: Union[int, Sequence[int]]):
        if isinstance(value, numbers.Integral):
            self.value = operator.index(value)
            self._hash = combine_scalar(value)
        else:
            self.value = tuple(operator.index(v) for v in value)
            if len(self.value) == 2:
                self._hash = combine_pair(*self.value)
            else:
                self._hash = combine_sequence(self.value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MixedKey):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"MixedKey({self.value!r})"
