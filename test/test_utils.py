"""
Utils module behavioral tests.

Scope
- Validate the Unset sentinel, coalesce(), rename(), mirror() and basename().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from declargs.utils import Unset, UnsetType, coalesce, rename, mirror, basename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingletonFalseyPrintable(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(Unset))


class TestHelpers(TestCase):
    """Behavioral tests for rename(), mirror() and basename()."""

    def testRenameDirectAndDecorator(self):
        def function():
            pass

        self.assertEqual(rename(function, "renamed").__name__, "renamed")

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__qualname__, "decorated")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            pair = mirror("pair")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._pair = ("x", 1)

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertIs(holder.pair, holder._pair)
        with self.assertRaises(AttributeError):
            holder.items = []

    def testBasename(self):
        self.assertEqual(basename("/usr/local/bin/tool"), "tool")
        self.assertEqual(basename("C:\\tools\\tool.exe"), "tool.exe")
        self.assertEqual(basename("tool"), "tool")


if __name__ == "__main__":
    unittest.main()
