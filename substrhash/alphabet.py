from __future__ import annotations
import string
from typing import Hashable, Iterable, Sequence

import numpy as np  # To encode a whole text into a vector of character values at once

from substrhash.errors import ConstructionError


class Alphabet:
    """Injective mapping from symbols to the integers [1, len(alphabet)].

    Zero is never handed out: with a zero-valued character "a" and "aa" would hash the same.
    Symbols can be any hashable (str characters, or ints if you want to hash `bytes`).
    """

    def __init__(self, symbols: Iterable[Hashable]):
        symbols = tuple(symbols)
        if not symbols:
            raise ConstructionError("alphabet must contain at least one symbol")
        values = {symbol: i + 1 for i, symbol in enumerate(symbols)}
        if len(values) != len(symbols):
            raise ConstructionError(f"alphabet has duplicate symbols: {symbols!r}")
        self._symbols = symbols
        self._values = values

    @classmethod
    def from_texts(cls, *texts: Sequence[Hashable]) -> Alphabet:
        """Smallest alphabet covering every symbol in `texts`, in sorted order (by repr when they do not compare)."""
        symbols = set().union(*texts)
        try:
            return cls(sorted(symbols))
        except TypeError:
            # Mixed symbol types (say ints and strs) have no natural order
            return cls(sorted(symbols, key=repr))

    @property
    def symbols(self) -> tuple:
        return self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol) -> bool:
        return symbol in self._values

    def __eq__(self, other) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __repr__(self) -> str:
        if all(isinstance(s, str) for s in self._symbols):
            return f"Alphabet({''.join(self._symbols)!r})"
        return f"Alphabet({self._symbols!r})"

    def value(self, symbol: Hashable) -> int:
        try:
            return self._values[symbol]
        except KeyError:
            raise ConstructionError(f"symbol {symbol!r} is not in {self!r}") from None

    def encode(self, text: Sequence[Hashable]) -> np.ndarray:
        """Character values of `text` as an int64 vector (values are tiny so int64 always fits)."""
        return np.fromiter((self.value(c) for c in text), dtype=np.int64, count=len(text))


LOWERCASE = Alphabet(string.ascii_lowercase)  # 'a' -> 1, ..., 'z' -> 26
