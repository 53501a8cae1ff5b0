"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel (singleton identity, falsy semantics, finality).
- coalesce() preserving every value except Unset.
- rename() in both its function and decorator forms.
- summarize() two-column help layout.
"""
import copy
import unittest
from unittest import TestCase

from subcommander.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor and the exported name refer to the same object.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(self.unset, Unset)

    def testFalsyButNotNone(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFinal(self) -> None:
        """
        The type cannot be subclassed.
        """
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class CoalesceTest(TestCase):
    def testUnsetFallsBack(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesPreserved(self) -> None:
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    def testFunctionForm(self) -> None:
        function = rename(lambda: None, "named")
        self.assertEqual((function.__name__, function.__qualname__), ("named", "named"))

    def testDecoratorForm(self) -> None:
        @rename("named")
        def function():
            pass

        self.assertEqual(function.__name__, "named")

    def testInvalidArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "named")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("named")(1)


class SummarizeTest(TestCase):
    """
    Two-column layout: 4-space indent, a 32-wide left column, one space, the description.
    """

    def testFittingEntry(self) -> None:
        self.assertEqual(list(summarize("stop", "Stop the debugger")), [
            "    stop" + " " * 29 + "Stop the debugger",
        ])

    def testExactWidthStillFits(self) -> None:
        left = "x" * SUMMARY_WIDTH
        self.assertEqual(list(summarize(left, "fits")), [SUMMARY_INDENT + left + " fits"])

    def testOverflowMovesDescription(self) -> None:
        left = "x" * (SUMMARY_WIDTH + 1)
        self.assertEqual(list(summarize(left, "moved")), [
            SUMMARY_INDENT + left,
            SUMMARY_INDENT + " " * SUMMARY_WIDTH + " moved",
        ])

    def testMultilineDescription(self) -> None:
        self.assertEqual(list(summarize("a", "first\nsecond")), [
            SUMMARY_INDENT + "a".ljust(SUMMARY_WIDTH) + " first",
            SUMMARY_INDENT + " " * SUMMARY_WIDTH + " second",
        ])

    def testNoDescriptionHasNoTrailingSpaces(self) -> None:
        self.assertEqual(list(summarize("stop")), ["    stop"])
        self.assertEqual(list(summarize("stop", "")), ["    stop"])


if __name__ == "__main__":
    unittest.main()
