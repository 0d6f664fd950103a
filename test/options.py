# python
"""
Options module behavioral tests (construction, sanitization, normalization).

Scope
- Validate option kinds and the derived properties (niladic, valued, array, variadic).
- Validate eager sanitization of constructor arguments (TypeError vs ValueError).
- Validate preferred display names and read-only metadata.
- Validate conversion and normalization of strings, numbers, booleans and arrays.

Conventions
- Test method names follow CamelCase per project convention.
- Options are built through the public classes only; names are positional.
"""

from __future__ import annotations

import re
import unittest
from unittest import TestCase

from argolith import (
    Boolean,
    Command,
    Flag,
    Function,
    Help,
    Number,
    Numbers,
    Option,
    OptionKind,
    Parametric,
    String,
    Strings,
    Version,
    All,
    Reference,
    Value,
)
from argolith.faults import InvalidParameterError, TooManyValuesError


class TestOptionKind(TestCase):
    """Behavioral tests for the closed set of option kinds."""

    def testKindsAreStrings(self):
        self.assertEqual(Flag("-f").kind, "flag")
        self.assertIs(Strings("-s").kind, OptionKind.STRINGS)
        self.assertEqual(len(OptionKind), 10)

    def testNiladicKinds(self):
        niladic = {kind for kind in OptionKind if kind.niladic}
        self.assertEqual(niladic, {
            OptionKind.FLAG,
            OptionKind.FUNCTION,
            OptionKind.COMMAND,
            OptionKind.HELP,
            OptionKind.VERSION,
        })

    def testValuedKinds(self):
        self.assertTrue(Flag("-f").valued)
        self.assertTrue(Command("run").valued)
        self.assertFalse(Function("--fn", exec=print).valued)
        self.assertFalse(Help("-h").valued)
        self.assertFalse(Version("-V", version="1.0").valued)

    def testVariadicOnlyWithoutSeparator(self):
        self.assertTrue(Strings("-s").variadic)
        self.assertFalse(Strings("-s", separator=",").variadic)
        self.assertFalse(String("-s").variadic)
        self.assertTrue(Numbers("-n").array)


class TestOptionMetadata(TestCase):
    """Behavioral tests for metadata shared by every option class."""

    def testBaseClassesCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            Option("-x")
        with self.assertRaises(TypeError):
            Parametric("-x")

    def testUnknownKeywordRejected(self):
        with self.assertRaises(TypeError):
            Flag("-f", bogus=True)

    def testNamesMustBeStrings(self):
        with self.assertRaises(TypeError):
            Flag("-f", 1)

    def testEmptyGroupRejected(self):
        with self.assertRaises(ValueError):
            Flag("-f", group="  ")

    def testDescrMustBeText(self):
        with self.assertRaises(TypeError):
            Flag("-f", descr=1)

    def testClusterLettersRejectWhitespace(self):
        with self.assertRaises(ValueError):
            Flag("-f", cluster_letters="a b")

    def testDeprecatedReason(self):
        self.assertEqual(Flag("-f", deprecated=" Use -g. ").deprecated, "Use -g.")
        self.assertTrue(Flag("-f", deprecated=True).deprecated)
        with self.assertRaises(ValueError):
            Flag("-f", deprecated=" ")

    def testRequiresShorthandIsCoerced(self):
        self.assertEqual(Flag("-f", requires="g").requires, Reference("g"))
        self.assertIsInstance(Flag("-f", requires={"a": 1, "b": 2}).requires, All)
        self.assertIsNone(Flag("-f").requires)
        with self.assertRaises(TypeError):
            Flag("-f", requires=1)

    def testRequiredIfShorthandIsCoerced(self):
        self.assertEqual(Flag("-f", required_if="g").required_if, Reference("g"))
        self.assertEqual(String("-s", required_if={"a": None}).required_if, Value("a", None))
        self.assertIsNone(Flag("-f").required_if)
        with self.assertRaises(TypeError):
            Flag("-f", required_if=1)

    def testEnvironmentVariableName(self):
        self.assertEqual(Flag("-f", env_var=" FLAG ").env_var, "FLAG")
        self.assertEqual(Numbers("-n", env_var="NUMS").env_var, "NUMS")
        self.assertIsNone(String("-s").env_var)
        with self.assertRaises(ValueError):
            String("-s", env_var=" ")
        with self.assertRaises(TypeError):
            String("-s", env_var=1)
        with self.assertRaises(TypeError):
            Function("--fn", exec=print, env_var="FN")

    def testFlagConvertsLikeBoolean(self):
        option = Flag("-f")
        self.assertFalse(option.convert(" 0 ", "FLAG"))
        self.assertFalse(option.convert("False", "FLAG"))
        self.assertTrue(option.convert("yes", "FLAG"))

    def testPreferredNameFallbacks(self):
        self.assertEqual(String("", "--long").preferred_name, "--long")
        self.assertEqual(String("-s", preferred_name="SOURCE").preferred_name, "SOURCE")
        self.assertEqual(Strings(positional="--").preferred_name, "--")
        self.assertEqual(Strings(positional=True).preferred_name, "unnamed")

    def testMetadataIsReadOnly(self):
        option = String("-s", enums=["a", "b"])
        self.assertEqual(option.names, ("-s",))
        self.assertEqual(option.enums, ("a", "b"))
        with self.assertRaises(AttributeError):
            option.names = ("-t",)

    def testRepresentation(self):
        option = Number("-n", "--num", default=1)
        self.assertTrue(repr(option).startswith("number(kind=<OptionKind.NUMBER: 'number'>, names=('-n', '--num')"))
        self.assertIn(("default", 1), list(option.__rich_repr__()))
        self.assertEqual(Strings.__typename__, "strings")

    def testPositionalMustBeBoolOrMarker(self):
        with self.assertRaises(TypeError):
            String("-s", positional=1)

    def testCallbacksMustBeCallable(self):
        with self.assertRaises(TypeError):
            String("-s", parse="upper")
        with self.assertRaises(TypeError):
            Function("--fn")
        with self.assertRaises(TypeError):
            Command("run", options=["-a"])

    def testFlagNegationNames(self):
        self.assertEqual(Flag("--color", negation_names=["--no-color"]).negation_names, ("--no-color",))
        with self.assertRaises(TypeError):
            Flag("--color", negation_names="--no-color")


class TestStringOption(TestCase):
    """Behavioral tests for string normalization."""

    def testEnumsAndRegexAreExclusive(self):
        with self.assertRaises(TypeError):
            String("-s", enums=["a"], regex="a")

    def testEnumsMustBeStrings(self):
        with self.assertRaises(TypeError):
            String("-s", enums=[1])
        with self.assertRaises(TypeError):
            String("-s", enums="abc")

    def testUnknownCaseRejected(self):
        with self.assertRaises(ValueError):
            String("-s", case="title")

    def testTrimThenCaseThenEnums(self):
        option = String("-s", enums=["abc"], trim=True, case="lower")
        self.assertEqual(option.normalize("  ABC ", "-s"), "abc")

    def testEnumViolation(self):
        option = String("-s", enums=["one", "two"])
        with self.assertRaises(InvalidParameterError) as context:
            option.normalize("three", "-s")
        self.assertEqual(
            context.exception.message,
            "Invalid parameter to -s: 'three'. Possible values are ['one', 'two'].",
        )
        self.assertEqual(context.exception.options["value"], "three")

    def testRegexIsSearched(self):
        option = String("-s", regex=r"\d")
        self.assertEqual(option.normalize("a1b", "-s"), "a1b")
        with self.assertRaises(InvalidParameterError) as context:
            option.normalize("abc", "-s")
        self.assertEqual(
            context.exception.message,
            r"Invalid parameter to -s: 'abc'. Value must match the regex /\d/.",
        )

    def testRegexAcceptsCompiledPattern(self):
        pattern = re.compile("^x", re.IGNORECASE)
        self.assertIs(String("-s", regex=pattern).regex, pattern)


class TestNumberOption(TestCase):
    """Behavioral tests for number conversion and normalization."""

    def testConvertIntegralAndFractional(self):
        option = Number("-n")
        self.assertEqual(option.convert("5", "-n"), 5)
        self.assertIsInstance(option.convert("5", "-n"), int)
        self.assertEqual(option.convert(" 2.5 ", "-n"), 2.5)

    def testConvertRejectsNonNumbers(self):
        with self.assertRaises(InvalidParameterError) as context:
            Number("-n").convert("abc", "-n")
        self.assertEqual(context.exception.message, "Invalid parameter to -n: 'abc'. Value must be a number.")

    def testConvertRejectsPythonOnlySpellings(self):
        option = Number("-n")
        for text in ("1_000", "٣", "inf", "nan", "infinity", "-0x1", "1e", "--1"):
            with self.subTest(text=text):
                with self.assertRaises(InvalidParameterError):
                    option.convert(text, "-n")

    def testConvertNumericForms(self):
        option = Number("-n")
        self.assertEqual(option.convert("", "-n"), 0)
        self.assertEqual(option.convert("  ", "-n"), 0)
        self.assertEqual(option.convert("1e3", "-n"), 1000)
        self.assertEqual(option.convert(".5", "-n"), 0.5)
        self.assertEqual(option.convert("5.", "-n"), 5)
        self.assertEqual(option.convert("+7", "-n"), 7)
        self.assertEqual(option.convert("0x1F", "-n"), 31)
        self.assertEqual(option.convert("0o17", "-n"), 15)
        self.assertEqual(option.convert("0b101", "-n"), 5)
        self.assertEqual(option.convert("-Infinity", "-n"), float("-inf"))

    def testRangeValidation(self):
        with self.assertRaises(ValueError):
            Number("-n", range=(10, 0))
        with self.assertRaises(TypeError):
            Number("-n", range=(0,))
        with self.assertRaises(TypeError):
            Number("-n", enums=[1], range=(0, 1))

    def testRoundingModes(self):
        self.assertEqual(Number("-n", round="trunc").normalize(-1.7, "-n"), -1)
        self.assertEqual(Number("-n", round="ceil").normalize(1.2, "-n"), 2)
        self.assertEqual(Number("-n", round="floor").normalize(-1.2, "-n"), -2)
        self.assertEqual(Number("-n", round="nearest").normalize(2.5, "-n"), 3)
        self.assertEqual(Number("-n", round="nearest").normalize(-2.5, "-n"), -2)
        with self.assertRaises(ValueError):
            Number("-n", round="banker")

    def testRoundingHappensBeforeRange(self):
        option = Number("-n", range=(0, 2), round="trunc")
        self.assertEqual(option.normalize(2.9, "-n"), 2)

    def testRangeViolation(self):
        with self.assertRaises(InvalidParameterError) as context:
            Number("-n", range=(0, 10)).normalize(11, "-n")
        self.assertEqual(context.exception.message, "Invalid parameter to -n: 11. Value must be in the range [0, 10].")

    def testEnumViolation(self):
        with self.assertRaises(InvalidParameterError) as context:
            Number("-n", enums=[1, 2]).normalize(3, "-n")
        self.assertEqual(context.exception.message, "Invalid parameter to -n: 3. Possible values are [1, 2].")


class TestBooleanOption(TestCase):
    """Behavioral tests for boolean conversion."""

    def testFalseTexts(self):
        option = Boolean("-b")
        for text in ("", "0", "000", "false", " FALSE ", "False"):
            with self.subTest(text=text):
                self.assertFalse(option.convert(text, "-b"))

    def testTrueTexts(self):
        option = Boolean("-b")
        for text in ("1", "true", "yes", "no", "0.0"):
            with self.subTest(text=text):
                self.assertTrue(option.convert(text, "-b"))

    def testAcceptsOnlyBooleans(self):
        self.assertTrue(Boolean("-b").accepts(False))
        self.assertFalse(Boolean("-b").accepts(0))
        self.assertFalse(Number("-n").accepts(True))


class TestArrayOption(TestCase):
    """Behavioral tests for array options (strings and numbers)."""

    def testSplitWithStringAndPattern(self):
        self.assertEqual(Strings("-s", separator=",").split("a,b,,c"), ["a", "b", "", "c"])
        self.assertEqual(Numbers("-n", separator=re.compile(r"\s*;\s*")).split("1 ; 2;3"), ["1", "2", "3"])
        self.assertEqual(Strings("-s").split("a,b"), ["a,b"])

    def testLimitMustBePositive(self):
        with self.assertRaises(ValueError):
            Strings("-s", limit=0)
        with self.assertRaises(TypeError):
            Strings("-s", limit=True)

    def testEmptySeparatorRejected(self):
        with self.assertRaises(ValueError):
            Strings("-s", separator="")

    def testUniqueKeepsFirstOccurrences(self):
        option = Strings("-s", unique=True)
        self.assertEqual(option.normalize_array(["b", "a", "b", "c", "a"], "-s"), ["b", "a", "c"])

    def testLimitCountsAfterDeduplication(self):
        option = Numbers("-n", unique=True, limit=2)
        self.assertEqual(option.normalize_array([1, 1, 2], "-n"), [1, 2])
        with self.assertRaises(TooManyValuesError) as context:
            option.normalize_array([1, 2, 3], "-n")
        self.assertEqual(context.exception.message, "Option -n has too many values (3). Should have at most 2.")
        self.assertEqual(context.exception.options["count"], 3)
        self.assertEqual(context.exception.options["limit"], 2)

    def testElementsAreNormalized(self):
        option = Strings("-s", case="upper", enums=["A", "B"])
        self.assertEqual(option.normalize_value(["a", "b"], "-s"), ["A", "B"])
        with self.assertRaises(InvalidParameterError):
            option.normalize_value(["c"], "-s")

    def testAcceptsListsOfElements(self):
        self.assertTrue(Numbers("-n").accepts([1, 2.5]))
        self.assertTrue(Strings("-s").accepts(("a",)))
        self.assertFalse(Strings("-s").accepts("a"))
        self.assertFalse(Numbers("-n").accepts([1, "2"]))

    def testArrayMetadataIsMirrored(self):
        option = Strings("-s", separator=",", append=True, unique=True, limit=3)
        self.assertEqual(option.separator, ",")
        self.assertTrue(option.append)
        self.assertTrue(option.unique)
        self.assertEqual(option.limit, 3)
        self.assertIn("limit", type(option).__introspectable__)


class TestNiladicOptions(TestCase):
    """Behavioral tests for command, help and version definitions."""

    def testCommandOptionsThunk(self):
        nested = {"flag": Flag("-f")}
        self.assertIs(Command("run", options=lambda: nested).resolve_options(), nested)
        self.assertEqual(dict(Command("run").resolve_options()), {})

    def testCommandThunkMustReturnMapping(self):
        with self.assertRaises(TypeError):
            Command("run", options=lambda: ["-f"]).resolve_options()

    def testHelpAndVersionText(self):
        self.assertEqual(Help("-h", usage="usage: prog").usage, "usage: prog")
        self.assertEqual(Version("-V", version=" 1.0 ").version, "1.0")
        with self.assertRaises(ValueError):
            Version("-V", version="")


if __name__ == "__main__":
    unittest.main()
