"""
Requirements module behavioral tests (model, evaluation, rendering).

Scope
- Validate requirement nodes: shorthand coercion, immutability, equality.
- Validate the pure evaluation visitor, including array and uniqueness semantics.
- Validate the rendering visitor: only the unsatisfied branch is reported.
- Validate the enumeration of leaves used by static validation.

Conventions
- Test method names follow CamelCase per project convention.
- Values maps are plain dicts; missing keys and None both mean "absent".
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argolith import All, Flag, Not, Number, One, Reference, String, Strings, Value, req
from argolith.requirements import coerce, evaluate, references, render
from argolith.utils import Unset


class TestRequirementModel(TestCase):
    """Behavioral tests for requirement nodes and shorthand."""

    def testStringIsReference(self):
        self.assertEqual(coerce("a"), Reference("a"))

    def testSingleEntryMappingIsValue(self):
        self.assertEqual(coerce({"a": 1}), Value("a", 1))

    def testMappingIsConjunctionOfValues(self):
        self.assertEqual(coerce({"a": 1, "b": None}), All(Value("a", 1), Value("b", None)))

    def testListValuesBecomeTuples(self):
        node = Value("a", ["x", "y"])
        self.assertEqual(node.value, ("x", "y"))
        self.assertEqual(hash(node), hash(Value("a", ("x", "y"))))

    def testNodesAreImmutable(self):
        with self.assertRaises(AttributeError):
            Reference("a").key = "b"
        with self.assertRaises(AttributeError):
            All("a").items = ()

    def testBuildersCoerceItems(self):
        expr = req.all("a", req.one({"b": "x"}, req.not_("c")))
        self.assertEqual(expr, All(Reference("a"), One(Value("b", "x"), Not(Reference("c")))))

    def testNamespaceCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            req()

    def testInvalidShorthandRejected(self):
        with self.assertRaises(TypeError):
            coerce(1)
        with self.assertRaises(TypeError):
            Reference(1)


class TestEvaluate(TestCase):
    """Behavioral tests for the boolean evaluation visitor."""

    def testReferencePresence(self):
        self.assertTrue(evaluate("a", {"a": 0}))
        self.assertFalse(evaluate("a", {"a": None}))
        self.assertFalse(evaluate("a", {}))

    def testValueSemantics(self):
        self.assertTrue(evaluate(Value("a"), {"a": "x"}))
        self.assertTrue(evaluate({"a": None}, {}))
        self.assertFalse(evaluate({"a": None}, {"a": "x"}))
        self.assertTrue(evaluate({"a": "x"}, {"a": "x"}))
        self.assertFalse(evaluate({"a": "x"}, {"a": "y"}))
        self.assertFalse(evaluate({"a": "x"}, {}))

    def testEmptyConjunctionAndDisjunction(self):
        self.assertTrue(evaluate(All(), {}))
        self.assertFalse(evaluate(One(), {}))

    def testNegation(self):
        self.assertTrue(evaluate(Not("a"), {}))
        self.assertFalse(evaluate(Not(One("a", "b")), {"b": True}))

    def testNestedExpression(self):
        expr = req.all("a", req.one({"b": 1}, req.not_("c")))
        self.assertTrue(evaluate(expr, {"a": True, "b": 1, "c": True}))
        self.assertTrue(evaluate(expr, {"a": True}))
        self.assertFalse(evaluate(expr, {"a": True, "b": 2, "c": True}))

    def testArraysCompareInOrder(self):
        options = {"s": Strings("-s")}
        self.assertTrue(evaluate({"s": ["a", "b"]}, {"s": ["a", "b"]}, options))
        self.assertFalse(evaluate({"s": ["b", "a"]}, {"s": ["a", "b"]}, options))
        self.assertFalse(evaluate({"s": ["a"]}, {"s": ["a", "b"]}, options))

    def testUniqueArraysCompareAsSets(self):
        options = {"s": Strings("-s", unique=True)}
        self.assertTrue(evaluate({"s": ["b", "a", "b"]}, {"s": ["a", "b"]}, options))

    def testRequiredValueIsNormalized(self):
        options = {"s": String("-s", case="lower")}
        self.assertTrue(evaluate({"s": "ABC"}, {"s": "abc"}, options))

    def testRejectedLiteralNeverMatches(self):
        options = {"s": String("-s", enums=("a",)), "n": Number("-n", range=(0, 10))}
        self.assertFalse(evaluate(Value("s", "z"), {"s": "a"}, options))
        self.assertTrue(evaluate(Not(Value("s", "z")), {"s": "a"}, options))
        self.assertFalse(evaluate({"n": 50}, {"n": 5}, options))

    def testEvaluationIsPure(self):
        values = {"a": True, "s": ["x"]}
        snapshot = {"a": True, "s": ["x"]}
        evaluate(req.all("a", {"s": ["x"]}, req.not_("b")), values, {"s": Strings("-s")})
        self.assertEqual(values, snapshot)

    def testDeferredValuesSatisfyEquality(self):
        class Deferred:
            def __await__(self):
                yield

        self.assertTrue(evaluate({"a": "x"}, {"a": Deferred()}))


class TestRender(TestCase):
    """Behavioral tests for the rendering of unsatisfied requirements."""

    def setUp(self):
        self.options = {
            "a": Flag("-a"),
            "b": String("-b"),
            "c": Number("-c"),
            "s": Strings("-s"),
        }

    def testSatisfiedRendersNothing(self):
        self.assertIsNone(render("a", {"a": True}, self.options))
        self.assertIsNone(render(All(), {}, self.options))

    def testMissingReference(self):
        self.assertEqual(render("b", {}, self.options), "-b")

    def testForbiddenPresence(self):
        self.assertEqual(render({"b": None}, {"b": "x"}, self.options), "no -b")
        self.assertEqual(render(Not("a"), {"a": True}, self.options), "no -a")

    def testWrongValue(self):
        self.assertEqual(render({"b": "x"}, {"b": "y"}, self.options), "-b = 'x'")
        self.assertEqual(render({"c": 2.0}, {"c": 1}, self.options), "-c = 2")
        self.assertEqual(render({"s": ["x", "y"]}, {"s": ["x"]}, self.options), "-s = ['x', 'y']")

    def testNegatedValue(self):
        self.assertEqual(render(Not({"b": "x"}), {"b": "x"}, self.options), "-b != 'x'")
        self.assertIsNone(render(Not({"b": "x"}), {"b": "y"}, self.options))

    def testConjunctionReportsFirstFailure(self):
        expr = All("a", "b", "c")
        self.assertEqual(render(expr, {"a": True}, self.options), "-b")

    def testDisjunctionReportsEveryAlternative(self):
        expr = All("a", One({"b": "x"}, "c"))
        self.assertEqual(render(expr, {"a": True, "b": "y"}, self.options), "(-b = 'x' or -c)")

    def testSingleAlternativeIsNotParenthesized(self):
        self.assertEqual(render(One("b"), {}, self.options), "-b")

    def testNegatedConjunctionBehavesLikeDisjunction(self):
        expr = Not(All("a", "b"))
        self.assertEqual(render(expr, {"a": True, "b": "x"}, self.options), "(no -a or no -b)")
        self.assertIsNone(render(expr, {"a": True}, self.options))

    def testEmptyDisjunctionIsUnsatisfied(self):
        self.assertIsNotNone(render(One(), {}, self.options))

    def testRejectedLiteralIsReportedAsWritten(self):
        options = {"e": String("-e", enums=["a"])}
        self.assertEqual(render({"e": "z"}, {"e": "a"}, options), "-e = 'z'")
        self.assertIsNone(render(Not({"e": "z"}), {"e": "a"}, options))


class TestRenderCondition(TestCase):
    """Behavioral tests for rendering a condition that holds (negate and invert)."""

    def setUp(self):
        self.options = {"a": Flag("-a"), "b": String("-b")}

    def _render(self, expr, values):
        return render(expr, values, self.options, True, True)

    def testHoldingReference(self):
        self.assertEqual(self._render("a", {"a": True}), "-a")
        self.assertIsNone(self._render("a", {}))

    def testHoldingAbsence(self):
        self.assertEqual(self._render({"b": None}, {}), "no -b")
        self.assertIsNone(self._render({"b": None}, {"b": "x"}))

    def testHoldingValue(self):
        self.assertEqual(self._render({"b": "x"}, {"b": "x"}), "-b = 'x'")
        self.assertIsNone(self._render({"b": "x"}, {"b": "y"}))

    def testConjunctionJoinsWithAnd(self):
        self.assertEqual(self._render(All("a", "b"), {"a": True, "b": "x"}), "(-a and -b)")

    def testDisjunctionReportsTheHoldingAlternative(self):
        self.assertEqual(self._render(One("a", "b"), {"a": True}), "-a")


class TestReferences(TestCase):
    """Behavioral tests for the enumeration of requirement leaves."""

    def testLeavesInOrder(self):
        expr = req.all("a", req.one({"b": 1}, req.not_({"c": None})))
        self.assertEqual(list(references(expr)), [("a", Unset), ("b", 1), ("c", None)])


if __name__ == "__main__":
    unittest.main()
