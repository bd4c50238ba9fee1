from substrhash.alphabet import LOWERCASE, Alphabet
from substrhash.errors import ConstructionError, RangeError, SubstringHashError
from substrhash.hash_combine import MixedKey, combine_pair, combine_scalar, combine_sequence
from substrhash.rolling_hashes import (
    DEFAULT_BASE,
    DEFAULT_MODULI,
    Fingerprint,
    FingerprintTable,
    construct,
    fingerprint,
    has_common_substring,
)
