"""
Utilities module behavioral tests (Unset sentinel, coalesce, rename, mirror).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from optline.utils import Unset, UnsetType, coalesce, mirror, rename


class TestUnset(TestCase):

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testSubclassingForbidden(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestCoalesce(TestCase):

    def testUnsetReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyPreserved(self):
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestRename(TestCase):

    def testFunctionForm(self):
        def f():
            pass

        rename(f, "do_work")
        self.assertEqual((f.__name__, f.__qualname__), ("do_work", "do_work"))

    def testDecoratorForm(self):
        @rename("do_work")
        def f():
            pass

        self.assertEqual(f.__name__, "do_work")

    def testWrongArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def testReadOnlyAndUnsetPublishedAsNone(self):
        class Holder:
            value = mirror("value")

            def __init__(self, value):
                self._value = value

        self.assertEqual(Holder(3).value, 3)
        self.assertIsNone(Holder(Unset).value)
        with self.assertRaises(AttributeError):
            Holder(3).value = 4


if __name__ == "__main__":
    unittest.main()
