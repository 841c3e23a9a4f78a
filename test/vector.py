"""
ArgumentVector behavioral tests (front-of-vector helpers and finalization).
"""
import unittest
from unittest import TestCase

from cmdtree import ArgumentVector
from cmdtree.parsers import Parsed


class TestArgumentVector(TestCase):

    def testSequenceProtocol(self):
        args = ArgumentVector(["a", "b"])
        self.assertEqual(len(args), 2)
        self.assertEqual(args[0], "a")
        self.assertEqual(list(args), ["a", "b"])
        self.assertIn("b", args)

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            ArgumentVector("clone")
        with self.assertRaises(TypeError):
            ArgumentVector(["clone", 1])

    def testFirstAndShift(self):
        args = ArgumentVector(["clone", "repo"])
        self.assertEqual(args.first(), "clone")
        self.assertEqual(args.shift(), "clone")
        self.assertEqual(args.tokens, ["repo"])
        args.shift()
        self.assertIsNone(args.first())
        self.assertEqual(args.first("none"), "none")
        with self.assertRaises(IndexError):
            args.shift()

    def testHasSubcommand(self):
        self.assertTrue(ArgumentVector(["clone"]).has_subcommand())
        self.assertFalse(ArgumentVector(["--verbose", "clone"]).has_subcommand())
        self.assertFalse(ArgumentVector(["-"]).has_subcommand())
        self.assertTrue(ArgumentVector([""]).has_subcommand())
        self.assertFalse(ArgumentVector().has_subcommand())

    def testApplyFinalizesTheVector(self):
        args = ArgumentVector(["a", "--verbose", "b"])
        result = args.apply(Parsed(("a", "b"), {"verbose": True, "count": None}, frozenset({"verbose"}), False))
        self.assertIs(result, args)
        self.assertEqual(args.tokens, ["a", "b"])
        self.assertTrue(args.flag_passed("verbose"))
        self.assertTrue(args.flag_passed("--verbose"))
        self.assertFalse(args.flag_passed("count"))
        self.assertIs(args.value("verbose"), True)
        self.assertIsNone(args.value("--count"))
        self.assertEqual(args.value("missing", "fallback"), "fallback")
        self.assertFalse(args.terminated)

    def testFlagPassedWithDefaultValue(self):
        """
        A flag explicitly set to its default value still counts as passed.
        """
        args = ArgumentVector().apply(Parsed((), {"verbose": False}, frozenset({"verbose"}), False))
        self.assertTrue(args.flag_passed("verbose"))
        self.assertIs(args.value("verbose"), False)

    def testRepr(self):
        self.assertTrue(repr(ArgumentVector(["x"])).startswith("argument-vector("))


if __name__ == "__main__":
    unittest.main()
