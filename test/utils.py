"""
Tests for the internal helpers (Unset, coalesce, rename, mirror).

This module verifies:
- The Unset sentinel is a falsy, printable, final singleton usable in unions.
- coalesce() only replaces Unset, never other falsy values.
- rename() works both as a direct call and as a decorator factory.
- mirror() exposes read-only copies of container state.
"""
import unittest
from unittest import TestCase

from cmdtree.utils import *


class TestUnset(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported object on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnionChecks(self) -> None:
        """
        `str | Unset` can be used directly in isinstance checks.
        """
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Subclass(UnsetType):
                pass


class TestCoalesce(TestCase):

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce([], [1]), [])


class TestRename(TestCase):

    def testDirectForm(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def testReadOnlyCopies(self):
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")

            def __init__(self):
                self._items = ("a", "b")
                self._mapping = {"key": ["value"]}

        holder = Holder()
        items = holder.items
        items.append("c")
        self.assertEqual(holder.items, ["a", "b"])

        holder.mapping["key"].append("other")
        self.assertEqual(holder.mapping, {"key": ["value"]})

        with self.assertRaises(AttributeError):
            holder.items = ()

    def testUnsetBecomesNone(self):
        class Holder:
            value = mirror("value")
            _value = Unset

        self.assertIsNone(Holder().value)


if __name__ == "__main__":
    unittest.main()
