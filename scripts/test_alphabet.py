from __future__ import annotations
import unittest

from substrhash.alphabet import LOWERCASE, Alphabet
from substrhash.errors import ConstructionError


class TestAlphabet(unittest.TestCase):
    def test_lowercase(self):
        self.assertEqual(len(LOWERCASE), 26)
        self.assertEqual(LOWERCASE.value("a"), 1)
        self.assertEqual(LOWERCASE.value("z"), 26)
        self.assertEqual(list(LOWERCASE.encode("abz")), [1, 2, 26])

    def test_values_are_a_bijection(self):
        alphabet = Alphabet("ACGT")
        self.assertEqual(sorted(alphabet.value(c) for c in "ACGT"), [1, 2, 3, 4])

    def test_from_texts(self):
        alphabet = Alphabet.from_texts("banana", "cab")
        self.assertEqual(alphabet.symbols, ("a", "b", "c", "n"))
        self.assertIn("n", alphabet)
        self.assertNotIn("z", alphabet)
        self.assertEqual(alphabet, Alphabet("abcn"))

    def test_from_texts_mixed_types(self):
        alphabet = Alphabet.from_texts([1, "a"], ["a", 2])
        self.assertEqual(len(alphabet), 3)
        self.assertEqual(sorted(alphabet.value(s) for s in [1, 2, "a"]), [1, 2, 3])

    def test_rejects(self):
        for symbols in ["", "aab"]:
            with self.assertRaises(ConstructionError):
                Alphabet(symbols)
        with self.assertRaises(ConstructionError):
            LOWERCASE.encode("abC")

    def test_empty_text(self):
        self.assertEqual(len(LOWERCASE.encode("")), 0)


if __name__ == "__main__":
    unittest.main()
