from __future__ import annotations
import logging
import numbers
from typing import Hashable, Iterator, Optional, Sequence

import numpy as np  # To hold the precomputed tables and compute prefix[i] = term[0] + ... + term[i]

from substrhash.alphabet import LOWERCASE, Alphabet
from substrhash.errors import ConstructionError, RangeError, SubstringHashError
from substrhash.hash_combine import combine_pair, combine_sequence
from substrhash.primes import is_prime

logger = logging.getLogger(__name__)

# 31 > 26 letters, and both moduli are prime (10^9 + 9 and 10^8 + 7), so "double hashing" out of the box.
DEFAULT_BASE = 31
DEFAULT_MODULI = (1_000_000_009, 100_000_007)

_INT64_MAX = int(np.iinfo(np.int64).max)


def _is_index(x) -> bool:
    return isinstance(x, numbers.Integral) and not isinstance(x, bool)


def _array_dtype(modulus: int, bound: int):
    """int64 when every product/prefix sum we form stays below 2^63, otherwise plain Python ints."""
    return np.int64 if modulus * bound <= _INT64_MAX else object


def _read_only(values, dtype) -> np.ndarray:
    array = np.array(values, dtype=dtype)
    array.flags.writeable = False
    return array


class Fingerprint(tuple):
    """K residues (one per modulus) of one substring.

    Only equal to other fingerprints: a plain tuple with the same numbers hashes differently, so it must not compare
    equal either.
    """

    __slots__ = ()

    def __eq__(self, other):
        if isinstance(other, Fingerprint):
            return tuple.__eq__(self, other)
        return False if isinstance(other, tuple) else NotImplemented

    def __ne__(self, other):
        equal = self.__eq__(other)
        return equal if equal is NotImplemented else not equal

    def __hash__(self) -> int:
        if len(self) == 2:
            return combine_pair(self[0], self[1])
        return combine_sequence(self)

    def __repr__(self) -> str:
        return f"Fingerprint{tuple.__repr__(self)}"


class FingerprintTable:
    """Polynomial prefix hashes of one text, one row per modulus, for O(1) substring fingerprints.

    With v(c) the alphabet value of c and B the base, per modulus p:

        prefix[j] = sum_{i <= j} v(text[i]) * B^i  (mod p)
        fingerprint(l, r) = (prefix[r] - prefix[l - 1]) * B^{-l}  (mod p)

    Multiplying by B^{-l} strips the offset, so the same substring gives the same residues wherever it occurs.
    The moduli must be prime for B^{-l} to exist; we check that (and everything else we can) up front.

    Everything is built in O(n * K) and never touched again, so concurrent reads are fine.
    """

    def __init__(
        self,
        text: Sequence[Hashable],
        moduli: Sequence[int] = DEFAULT_MODULI,
        base: int = DEFAULT_BASE,
        alphabet: Alphabet = LOWERCASE,
    ):
        moduli, base = self._validate(moduli, base, alphabet)
        self._text = text if isinstance(text, (str, bytes)) else tuple(text)
        self._n = n = len(self._text)
        self._moduli = moduli
        self._base = base
        self._alphabet = alphabet

        values = alphabet.encode(self._text)
        bound = max(n, len(alphabet), 1)
        prefix_rows, power_rows, inverse_rows = [], [], []
        for mod in moduli:
            dtype = _array_dtype(mod, bound)

            # Powers of the base: B^0 .. B^n
            powers = [1] * (n + 1)
            for i in range(1, n + 1):
                powers[i] = powers[i - 1] * base % mod

            # Only one real inverse (Fermat, since mod is prime), the rest by walking back: B^{-i} = B^{-(i+1)} * B
            inverses = [0] * (n + 1)
            inverses[n] = pow(powers[n], mod - 2, mod)
            for i in range(n - 1, -1, -1):
                inverses[i] = inverses[i + 1] * base % mod

            power_array = _read_only(powers, dtype)
            terms = values.astype(dtype) * power_array[:n] % mod
            prefix_rows.append(_read_only(np.cumsum(terms) % mod, dtype))
            power_rows.append(power_array)
            inverse_rows.append(_read_only(inverses, dtype))

        self._prefix = tuple(prefix_rows)
        self._powers = tuple(power_rows)
        self._inverse_powers = tuple(inverse_rows)
        logger.debug(
            "built fingerprint table: n=%d, moduli=%s, base=%d, dtypes=%s",
            n, moduli, base, [row.dtype.name for row in self._powers],
        )

    @staticmethod
    def _validate(moduli, base, alphabet) -> tuple[tuple[int, ...], int]:
        if not isinstance(alphabet, Alphabet):
            raise ConstructionError(f"alphabet must be an Alphabet, got {type(alphabet).__name__}")
        if not _is_index(base) or base <= 0:
            raise ConstructionError(f"base must be a positive integer, got {base!r}")
        base = int(base)
        if base <= len(alphabet):
            raise ConstructionError(f"base {base} must be larger than the alphabet size {len(alphabet)}")

        moduli = tuple(moduli)
        if not moduli:
            raise ConstructionError("at least one modulus is required")
        if not all(_is_index(mod) for mod in moduli):
            raise ConstructionError(f"moduli must be integers, got {moduli!r}")
        moduli = tuple(int(mod) for mod in moduli)
        if len(set(moduli)) != len(moduli):
            raise ConstructionError(f"moduli must be pairwise distinct, got {moduli}")
        for mod in moduli:
            if not is_prime(mod):
                raise ConstructionError(f"modulus {mod} is not prime, inverse powers of the base would be garbage")
            if base % mod == 0:
                raise ConstructionError(f"base {base} is a multiple of modulus {mod}")
        return moduli, base

    def __len__(self) -> int:
        return self._n

    def __repr__(self) -> str:
        return f"FingerprintTable(n={self._n}, moduli={self._moduli}, base={self._base})"

    @property
    def text(self) -> Sequence[Hashable]:
        return self._text

    @property
    def moduli(self) -> tuple[int, ...]:
        return self._moduli

    @property
    def base(self) -> int:
        return self._base

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    def prefix_hashes(self, k: int) -> np.ndarray:
        return self._prefix[k]

    def base_powers(self, k: int) -> np.ndarray:
        return self._powers[k]

    def inverse_base_powers(self, k: int) -> np.ndarray:
        return self._inverse_powers[k]

    def _check_bounds(self, l: int, r: int) -> None:
        if not (_is_index(l) and _is_index(r)):
            raise RangeError(f"bounds must be integers, got ({l!r}, {r!r})")
        if not 0 <= l <= r < self._n:
            raise RangeError(f"need 0 <= l <= r < {self._n}, got ({l}, {r})")

    def fingerprint(self, l: int, r: int) -> Fingerprint:
        """Fingerprint of text[l..r], both ends inclusive. Works for any number of moduli."""
        self._check_bounds(l, r)
        residues = []
        for mod, prefix, inverses in zip(self._moduli, self._prefix, self._inverse_powers):
            high = int(prefix[r])
            low = int(prefix[l - 1]) if l > 0 else 0
            residues.append((high - low) % mod * int(inverses[l]) % mod)
        return Fingerprint(residues)

    def fingerprint_pair(self, l: int, r: int) -> Fingerprint:
        """Same as `fingerprint` but unrolled for exactly two moduli."""
        if len(self._moduli) != 2:
            raise SubstringHashError(f"fingerprint_pair needs exactly 2 moduli, this table has {len(self._moduli)}")
        self._check_bounds(l, r)
        mod1, mod2 = self._moduli
        prefix1, prefix2 = self._prefix
        inverses1, inverses2 = self._inverse_powers
        if l > 0:
            low1, low2 = int(prefix1[l - 1]), int(prefix2[l - 1])
        else:
            low1 = low2 = 0
        h1 = (int(prefix1[r]) - low1) % mod1 * int(inverses1[l]) % mod1
        h2 = (int(prefix2[r]) - low2) % mod2 * int(inverses2[l]) % mod2
        return Fingerprint((h1, h2))

    def substrings_equal(self, l1: int, r1: int, l2: int, r2: int) -> bool:
        """Probabilistic equality of text[l1..r1] and text[l2..r2]: never a false negative."""
        self._check_bounds(l1, r1)
        self._check_bounds(l2, r2)
        if r1 - l1 != r2 - l2:
            return False
        return self.fingerprint(l1, r1) == self.fingerprint(l2, r2)

    def window_fingerprints(self, length: int) -> Iterator[Fingerprint]:
        """Fingerprints of every window of `length` characters, left to right. Nothing if the text is shorter."""
        if not _is_index(length) or length < 1:
            raise RangeError(f"window length must be a positive integer, got {length!r}")
        query = self.fingerprint_pair if len(self._moduli) == 2 else self.fingerprint
        return (query(l, l + length - 1) for l in range(self._n - length + 1))

    def count_distinct(self, length: int) -> int:
        return len(set(self.window_fingerprints(length)))


def construct(
    text: Sequence[Hashable],
    moduli: Sequence[int] = DEFAULT_MODULI,
    base: int = DEFAULT_BASE,
    alphabet: Alphabet = LOWERCASE,
) -> FingerprintTable:
    return FingerprintTable(text, moduli=moduli, base=base, alphabet=alphabet)


def fingerprint(table: FingerprintTable, l: int, r: int) -> Fingerprint:
    return table.fingerprint(l, r)


def has_common_substring(
    string1: Sequence[Hashable],
    string2: Sequence[Hashable],
    substring_size: int,
    moduli: Sequence[int] = DEFAULT_MODULI,
    base: Optional[int] = None,
    alphabet: Optional[Alphabet] = None,
) -> bool:
    """
    Check if two strings contain the same substring of `substring_size` characters.

    Both tables have to agree on alphabet and base or the fingerprints mean nothing, so by default the alphabet is
    built from the union of both strings and the base is the smallest one that still beats it (at least 31).
    Like any fingerprint comparison this can give a false positive, never a false negative.
    """
    if not _is_index(substring_size) or substring_size < 1:
        raise RangeError(f"substring_size must be a positive integer, got {substring_size!r}")
    if substring_size > min(len(string1), len(string2)):
        return False
    if alphabet is None:
        alphabet = Alphabet.from_texts(string1, string2)
    if base is None:
        base = max(DEFAULT_BASE, len(alphabet) + 1)

    seen = set(FingerprintTable(string1, moduli, base, alphabet).window_fingerprints(substring_size))
    other = FingerprintTable(string2, moduli, base, alphabet)
    return any(fp in seen for fp in other.window_fingerprints(substring_size))
