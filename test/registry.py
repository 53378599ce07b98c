"""
Registry module behavioral tests (slots, lookup, shadowing, strict mode).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from optline import (
    BoolOption,
    IntOption,
    StrOption,
    DuplicatedOptionError,
    FaultCode,
    OptionId,
    OptParser,
    Registry,
)
from optline.utils import Unset


class TestRegistry(TestCase):

    def testAddReturnsStableIds(self):
        registry = Registry()
        first = registry.add(a := BoolOption("-a", "--alpha"))
        second = registry.add(b := IntOption("--beta"))
        self.assertEqual((first, second), (0, 1))
        self.assertIsInstance(first, OptionId)
        self.assertIs(registry[first], a)
        self.assertIs(registry[second], b)
        self.assertEqual(len(registry), 2)
        self.assertEqual(list(registry), [a, b])

    def testIndexRequiresOptionId(self):
        registry = Registry()
        registry.add(BoolOption("--alpha"))
        with self.assertRaises(TypeError):
            registry[0]

    def testFindByShortAndLong(self):
        registry = Registry()
        registry.add(option := StrOption("-l", "--ls"))
        self.assertIs(registry.find_by_short("l"), option)
        self.assertIs(registry.find_by_long("ls"), option)

    def testNotFoundIsUnset(self):
        registry = Registry()
        registry.add(StrOption("--ls"))
        self.assertIs(registry.find_by_short("l"), Unset)
        self.assertIs(registry.find_by_long("nope"), Unset)

    def testOnlyOptionsAccepted(self):
        with self.assertRaises(TypeError):
            Registry().add("--alpha")

    def testSameObjectTwiceRejected(self):
        registry = Registry()
        registry.add(option := BoolOption("--alpha"))
        with self.assertRaises(ValueError):
            registry.add(option)
        self.assertIn(option, registry)

    def testFirstMatchShadows(self):
        registry = Registry()
        registry.add(first := BoolOption("-a", "--alpha"))
        with self.assertLogs("optline.registry", level="DEBUG") as captured:
            registry.add(second := BoolOption("-a", "--other"))
        self.assertIs(registry.find_by_short("a"), first)
        self.assertIs(registry.find_by_long("other"), second)
        self.assertTrue(any("shadowed" in line for line in captured.output))

    def testStrictRejectsDuplicateShort(self):
        registry = Registry(strict=True)
        registry.add(BoolOption("-a", "--alpha"))
        with self.assertRaises(DuplicatedOptionError) as context:
            registry.add(BoolOption("-a", "--other"))
        self.assertEqual(context.exception.options["code"], FaultCode.DUPLICATED_OPTION)
        self.assertEqual(context.exception.options["name"], "-a")
        self.assertEqual(len(registry), 1)

    def testStrictRejectsDuplicateLong(self):
        registry = Registry(strict=True)
        registry.add(BoolOption("--alpha"))
        with self.assertRaises(DuplicatedOptionError):
            registry.add(IntOption("-b", "--alpha"))

    def testParserStrictMode(self):
        parser = OptParser(BoolOption("--alpha"), strict=True)
        self.assertTrue(parser.registry.strict)
        with self.assertRaises(DuplicatedOptionError):
            parser.add(BoolOption("--alpha"))

    def testShadowedOptionUnreachableWhileParsing(self):
        first = IntOption("-n", "--number")
        second = IntOption("-n", "--count")
        OptParser(first, second).parse(["prog", "-n=3"])
        self.assertEqual(first.value, 3)
        self.assertFalse(second.present)


if __name__ == "__main__":
    unittest.main()
