"""
Registry behavioral tests (registration, exact and prefix resolution).

Scope
- Validate exact matches win over prefix ambiguity.
- Validate unique-prefix resolution across names and aliases.
- Validate unknown/ambiguous faults and registration-time collisions.
- Validate that registration order never changes the outcome.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from subcommander.entries import Singleton
from subcommander.faults import AmbiguousCommandError, DuplicateNameError, UnknownCommandError
from subcommander.registry import CommandSpec, Registry


def spec(name, *aliases):
    return CommandSpec(name, aliases, "Describe %s" % name, Singleton(object()))


class TestResolution(TestCase):
    """Token resolution over a small, fixed set of commands."""

    def setUp(self):
        self.registry = Registry()
        self.debug = self.registry.register(spec("debug", "start_debugging"))
        self.degauss = self.registry.register(spec("degauss"))
        self.status = self.registry.register(spec("status", "stat"))

    def testExactNameResolves(self):
        self.assertIs(self.registry.resolve("debug"), self.debug)

    def testExactAliasResolves(self):
        self.assertIs(self.registry.resolve("start_debugging"), self.debug)

    def testUniquePrefixResolves(self):
        self.assertIs(self.registry.resolve("debu"), self.debug)
        self.assertIs(self.registry.resolve("dega"), self.degauss)

    def testUniqueAliasPrefixResolves(self):
        self.assertIs(self.registry.resolve("start"), self.debug)

    def testKeysOfOneCommandCollapse(self):
        # "sta" prefixes both "status" and its alias "stat"
        self.assertIs(self.registry.resolve("sta"), self.status)

    def testSharedPrefixIsAmbiguous(self):
        with self.assertRaises(AmbiguousCommandError) as context:
            self.registry.resolve("de")
        self.assertEqual(context.exception.token, "de")
        self.assertEqual(context.exception.candidates, ("debug", "degauss"))
        self.assertEqual(context.exception.message, "Ambiguous command 'de'")

    def testUnmatchedTokenIsUnknown(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.registry.resolve("unknown")
        self.assertEqual(context.exception.message, "Unknown command 'unknown'")

    def testEmptyTokenIsUnknown(self):
        with self.assertRaises(UnknownCommandError):
            self.registry.resolve("")

    def testLongerTokenThanAnyKeyIsUnknown(self):
        with self.assertRaises(UnknownCommandError):
            self.registry.resolve("debugger")

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            self.registry.resolve(1)


class TestExactPrecedence(TestCase):
    """An exact key wins even when it also prefixes another command."""

    def testExactMatchBypassesAmbiguity(self):
        for order in (("debug", "debugger"), ("debugger", "debug")):
            with self.subTest(order=order):
                registry = Registry()
                specs = {name: registry.register(spec(name)) for name in order}
                self.assertIs(registry.resolve("debug"), specs["debug"])
                self.assertIs(registry.resolve("debugg"), specs["debugger"])
                with self.assertRaises(AmbiguousCommandError):
                    registry.resolve("deb")

    def testExactAliasBypassesAmbiguity(self):
        registry = Registry()
        go = registry.register(spec("run", "go"))
        registry.register(spec("gofmt"))
        self.assertIs(registry.resolve("go"), go)


class TestRegistration(TestCase):
    """Registration bookkeeping and collisions."""

    def testIterationFollowsRegistrationOrder(self):
        registry = Registry()
        for name in ("stop", "debug", "attach"):
            registry.register(spec(name))
        self.assertEqual([item.name for item in registry], ["stop", "debug", "attach"])
        self.assertEqual(len(registry), 3)

    def testContainsTestsExactKeys(self):
        registry = Registry()
        registry.register(spec("debug", "go"))
        self.assertIn("go", registry)
        self.assertNotIn("deb", registry)

    def testAliasCollidingWithNameRejected(self):
        registry = Registry()
        registry.register(spec("debug"))
        with self.assertRaises(DuplicateNameError) as context:
            registry.register(spec("start", "debug"))
        self.assertEqual(context.exception.owner, "debug")

    def testAliasCollidingWithAliasRejected(self):
        registry = Registry()
        registry.register(spec("debug", "go"))
        with self.assertRaises(DuplicateNameError):
            registry.register(spec("run", "go"))

    def testSameNameTwiceRejected(self):
        registry = Registry()
        registry.register(spec("debug"))
        with self.assertRaises(DuplicateNameError):
            registry.register(spec("debug"))

    def testFailedRegistrationLeavesNoTrace(self):
        registry = Registry()
        registry.register(spec("debug"))
        with self.assertRaises(DuplicateNameError):
            registry.register(spec("start", "begin", "debug"))
        self.assertNotIn("start", registry)
        self.assertNotIn("begin", registry)

    def testInvalidNamesRejected(self):
        registry = Registry()
        with self.assertRaises(TypeError):
            registry.register(spec(1))
        with self.assertRaises(ValueError):
            registry.register(spec("  "))
        with self.assertRaises(ValueError):
            registry.register(spec(" debug"))

    def testNamesIncludeAliases(self):
        self.assertEqual(spec("debug", "go", "start").names, ("debug", "go", "start"))


if __name__ == "__main__":
    unittest.main()
