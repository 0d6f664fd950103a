"""
Tests for the utilities shared by the option model, the registry and the parser.

Scope
- Validate the Unset sentinel and coalesce().
- Validate command-line splitting, including the completion cursor marker.
- Validate Gestalt similarity scores and the "did you mean" ranking.
- Validate how diagnostics quote values (display()).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import re
import unittest
from unittest import TestCase

from argolith.utils import CURSOR, Unset, UnsetType, coalesce, display, gestalt, mirror, similar, split


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Subclass(UnsetType):
                pass

    def testUnsetSupportsUnionsInIsinstance(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("name", str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testCoalesceReplacesOnlyUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class TestMirror(TestCase):
    """Behavioral tests for read-only mirrored properties."""

    def testMirrorReturnsFreshContainers(self):
        class Holder:
            values = mirror("values")

            def __init__(self):
                self._values = ["a", ("b", "c")]

        holder = Holder()
        copied = holder.values
        copied.append("d")
        self.assertEqual(holder.values, ["a", ("b", "c")])
        self.assertEqual(Holder.values.fget.__name__, "values")

    def testMirrorIsReadOnly(self):
        class Holder:
            value = mirror("value")

        with self.assertRaises(AttributeError):
            Holder().value = 1


class TestSplit(TestCase):
    """Behavioral tests for command-line splitting."""

    def testSplitOnSpacesAndNewlines(self):
        self.assertEqual(split("prog  -a\nb "), ["prog", "-a", "b"])

    def testSplitKeepsQuotedSpaces(self):
        self.assertEqual(split("prog -a 'b c'"), ["prog", "-a", "b c"])

    def testSplitOtherQuoteIsLiteral(self):
        self.assertEqual(split("""a "b'c" 'd"e'"""), ["a", "b'c", 'd"e'])

    def testSplitMarksCursorInsideArgument(self):
        self.assertEqual(split("a bc", 3), ["a", "b" + CURSOR + "c"])

    def testSplitMarksCursorAtEnd(self):
        self.assertEqual(split("a ", 2), ["a", CURSOR])
        self.assertEqual(split("a b", 3), ["a", "b" + CURSOR])

    def testSplitRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            split(["a", "b"])


class TestSimilarity(TestCase):
    """Behavioral tests for Gestalt similarity and name suggestions."""

    def testGestaltIdenticalAndDisjoint(self):
        self.assertEqual(gestalt("abc", "abc"), 1.0)
        self.assertEqual(gestalt("abc", "xyz"), 0.0)
        self.assertEqual(gestalt("", ""), 0.0)

    def testGestaltCountsBothSidesOfTheLongestRun(self):
        # "WIKIM" then "IA" on the right-hand remainders
        self.assertAlmostEqual(gestalt("WIKIMEDIA", "WIKIMANIA"), 14 / 18)

    def testGestaltPrefix(self):
        self.assertAlmostEqual(gestalt("verbose", "verbos"), 12 / 13)

    def testSimilarRanksMostSimilarFirst(self):
        names = ["--quiet", "--version", "--verbose"]
        suggestions = similar("--verbos", names)
        self.assertEqual(suggestions[0], "--verbose")
        self.assertNotIn("--quiet", suggestions)

    def testSimilarIgnoresPunctuationAndCase(self):
        self.assertEqual(similar("VERBOSE", ["--verbose"]), ["--verbose"])

    def testSimilarBelowThreshold(self):
        self.assertEqual(similar("--xyz", ["--verbose", "--quiet"]), [])


class TestDisplay(TestCase):
    """Behavioral tests for the quoting of values in diagnostics."""

    def testDisplayScalars(self):
        self.assertEqual(display(True), "true")
        self.assertEqual(display(False), "false")
        self.assertEqual(display("a"), "'a'")
        self.assertEqual(display(5.0), "5")
        self.assertEqual(display(2.5), "2.5")
        self.assertEqual(display(3), "3")

    def testDisplayContainers(self):
        self.assertEqual(display(["a", 1]), "['a', 1]")
        self.assertEqual(display(("a",)), "['a']")

    def testDisplayPattern(self):
        self.assertEqual(display(re.compile(r"\d+")), r"/\d+/")


if __name__ == "__main__":
    unittest.main()
