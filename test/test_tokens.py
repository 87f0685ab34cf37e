# python
"""
Tokenizer behavioral tests.

Scope
- Validate cursor movement (peek/next/skip/stream/last/set_index).
- Validate that out-of-range operations raise and leave the cursor untouched.
- Validate construction checks.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from conduit import Tokenizer


class TestTokenizer(TestCase):
    """Behavioral tests for Tokenizer."""

    def setUp(self):
        self.tokens = Tokenizer(["-v", "value", "a", "b"])

    def testPeekDoesNotConsume(self):
        self.assertEqual(self.tokens.peek(), "-v")
        self.assertEqual(self.tokens.peek(2), ("-v", "value"))
        self.assertEqual(self.tokens.index, 0)

    def testNextConsumes(self):
        self.assertEqual(self.tokens.next(), "-v")
        self.assertEqual(self.tokens.next(2), ("value", "a"))
        self.assertEqual(self.tokens.index, 3)
        self.assertEqual(self.tokens.remaining(), 1)
        self.assertEqual(self.tokens.total(), 4)

    def testNextPastEndRaisesAndKeepsIndex(self):
        self.tokens.skip(3)
        with self.assertRaises(IndexError):
            self.tokens.next(2)
        self.assertEqual(self.tokens.index, 3)
        self.assertEqual(self.tokens.next(), "b")
        with self.assertRaises(IndexError):
            self.tokens.next()
        with self.assertRaises(IndexError):
            self.tokens.peek()

    def testNegativeSizeRejected(self):
        with self.assertRaises(ValueError):
            self.tokens.next(-1)
        with self.assertRaises(ValueError):
            self.tokens.skip(-2)

    def testHasNext(self):
        self.assertTrue(self.tokens.has_next())
        self.assertTrue(self.tokens.has_next(4))
        self.assertFalse(self.tokens.has_next(5))
        self.assertTrue(self.tokens.has_next(0))

    def testZeroSizedReadsAreEmpty(self):
        self.assertEqual(self.tokens.next(0), ())
        self.assertEqual(self.tokens.index, 0)

    def testStreamConsumesRemaining(self):
        self.tokens.skip()
        stream = self.tokens.stream()
        self.assertEqual(self.tokens.index, 4)
        self.assertFalse(self.tokens.has_next())
        self.assertEqual(list(stream), ["value", "a", "b"])
        self.assertEqual(list(stream), [])

    def testPeekStreamKeepsIndex(self):
        self.tokens.skip(2)
        self.assertEqual(list(self.tokens.peek_stream()), ["a", "b"])
        self.assertEqual(self.tokens.index, 2)

    def testSetIndexBounds(self):
        self.tokens.set_index(4)
        self.assertEqual(self.tokens.remaining(), 0)
        self.tokens.set_index(0)
        self.assertEqual(self.tokens.peek(), "-v")
        with self.assertRaises(IndexError):
            self.tokens.set_index(5)
        with self.assertRaises(IndexError):
            self.tokens.set_index(-1)

    def testLastJumpsToEnd(self):
        self.assertEqual(self.tokens.last(), "b")
        self.assertEqual(self.tokens.index, 4)

    def testLastOnEmptyRaises(self):
        with self.assertRaises(IndexError):
            Tokenizer([]).last()

    def testArgumentsAreImmutable(self):
        source = ["a", "b"]
        tokens = Tokenizer(source)
        source.append("c")
        self.assertEqual(tokens.arguments, ("a", "b"))

    def testStringArgumentsRejected(self):
        with self.assertRaises(TypeError):
            Tokenizer("-v value")

    def testNonStringItemsRejected(self):
        with self.assertRaises(TypeError):
            Tokenizer(["-v", 1])


if __name__ == "__main__":
    unittest.main()
