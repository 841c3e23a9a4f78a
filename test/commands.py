"""
Commands module behavioral tests (tree construction and metadata).

Scope
- Validate name derivation, sibling uniqueness and declaration checks.
- Validate the non-owning parent reference and the ancestry helpers.
- Validate decorator/direct factory forms and parser variant selection.
- Validate usage errors built for run callbacks.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Command, command, Option, Flag).
"""
import gc
import unittest
from unittest import TestCase

from cmdtree import Command, command, Option, Flag, UsageError
from cmdtree.parsers import MinimalParser, FullParser


def noop(command, args):
    pass


class TestCommandConstruction(TestCase):
    """Behavioral tests for Command metadata."""

    def testNameFromUsage(self):
        self.assertEqual(Command(noop, usage="foo bar [args]").name, "foo")

    def testNameFromFirstUsageLine(self):
        self.assertEqual(Command(noop, usage="\n  clone [options]\nclone2").name, "clone")

    def testKeyOverridesUsage(self):
        c = Command(noop, key="create", usage="new [options]")
        self.assertEqual(c.name, "create")
        self.assertEqual(c.key, "create")

    def testUnsetKeyReadsAsNone(self):
        self.assertIsNone(Command(noop, usage="foo").key)

    def testNameIsRequired(self):
        with self.assertRaises(ValueError):
            Command(noop)
        with self.assertRaises(ValueError):
            Command(noop, usage="   \n  ")
        with self.assertRaises(ValueError):
            Command(noop, key="  ")

    def testCallbackMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("noop", key="tool")

    def testOptionsMustBeDeclarations(self):
        with self.assertRaises(TypeError):
            Command(noop, key="tool", options=["--verbose"])
        with self.assertRaises(TypeError):
            Command(noop, key="tool", options="--verbose")

    def testPassthroughCannotDeclareOptions(self):
        with self.assertRaises(ValueError):
            Command(noop, key="git", passthrough=True, options=[Flag("--verbose")])

    def testDuplicateOptionNamesRejected(self):
        with self.assertRaises(ValueError):
            Command(noop, key="tool", options=[Flag("-v", "--verbose"), Option("-v", "--value")])

    def testParserVariant(self):
        self.assertIsInstance(Command(noop, key="tool").parser, MinimalParser)
        self.assertIsInstance(Command(noop, key="tool", options=[Flag("--verbose")]).parser, FullParser)

    def testRunnable(self):
        self.assertTrue(Command(noop, key="tool").runnable)
        self.assertFalse(Command(key="tool").runnable)
        self.assertIsNone(Command(key="tool").callback)

    def testDefaultsForTemplates(self):
        c = Command(noop, key="tool")
        self.assertEqual(c.usage, "")
        self.assertEqual(c.long, "")
        self.assertFalse(c.passthrough)
        self.assertEqual(c.options, [])

    def testRepr(self):
        self.assertTrue(repr(Command(noop, key="tool")).startswith("command(name='tool'"))


class TestCommandTree(TestCase):
    """Behavioral tests for parent/children wiring."""

    def setUp(self):
        self.root = Command(key="tool", usage="tool <command> [<args>]")
        self.issue = Command(key="issue", parent=self.root)
        self.label = Command(noop, usage="label <NAME>", parent=self.issue)

    def testChildrenAndParent(self):
        self.assertEqual(self.root.children, {"issue": self.issue})
        self.assertIs(self.root.child("issue"), self.issue)
        self.assertIs(self.label.parent, self.issue)
        self.assertIsNone(self.root.parent)

    def testChildrenMappingIsACopy(self):
        self.root.children.clear()
        self.assertIn("issue", self.root.children)

    def testUnknownChild(self):
        with self.assertRaises(KeyError):
            self.root.child("pr")

    def testRootAndPath(self):
        self.assertIs(self.label.root, self.root)
        self.assertIs(self.root.root, self.root)
        self.assertEqual(self.label.path, (self.root, self.issue, self.label))

    def testSiblingNamesMustBeUnique(self):
        with self.assertRaises(ValueError):
            Command(noop, usage="issue [options]", parent=self.root)

    def testUseReturnsTheChild(self):
        pr = Command(noop, key="pr")
        self.assertIs(self.root.use(pr), pr)
        self.assertIs(pr.parent, self.root)

    def testUseRejectsCycles(self):
        with self.assertRaises(ValueError):
            self.label.use(self.root)
        with self.assertRaises(ValueError):
            self.root.use(self.root)

    def testUseRejectsCommandAttachedElsewhere(self):
        with self.assertRaises(ValueError):
            Command(key="other").use(self.label)

    def testUseRequiresCommand(self):
        with self.assertRaises(TypeError):
            self.root.use(noop)

    def testParentIsNotOwned(self):
        """
        The child holds its parent weakly; a dropped tree leaves no parent.
        """
        orphan = Command(noop, key="child", parent=Command(key="parent"))
        gc.collect()
        self.assertIsNone(orphan.parent)


class TestCommandFactory(TestCase):
    """Behavioral tests for the command() factory and Command.command()."""

    def testDecoratorForm(self):
        @command(usage="tool <command>")
        def tool(cmd, args):
            pass

        self.assertIsInstance(tool, Command)
        self.assertEqual(tool.name, "tool")

    def testDirectForm(self):
        tool = command(noop, key="tool")
        self.assertIs(tool.callback, noop)

    def testChildDecorator(self):
        tool = Command(key="tool")

        @tool.command(usage="clone [-p] <REPO>", options=[Flag("-p", "--private")])
        def clone(cmd, args):
            pass

        self.assertIs(tool.child("clone"), clone)
        self.assertIs(clone.parent, tool)
        self.assertIsInstance(clone.parser, FullParser)

    def testDecoratorRequiresCallable(self):
        with self.assertRaises(TypeError):
            command(key="tool")("noop")


class TestCommandDocs(TestCase):
    """Behavioral tests for documentation shortcuts on Command."""

    def setUp(self):
        self.clone = Command(noop, usage="clone [-p] <REPO>", long="Clone a repository.")

    def testSynopsis(self):
        self.assertEqual(self.clone.synopsis("hub"), "Usage: hub clone [-p] <REPO>")

    def testUsageError(self):
        error = self.clone.usage_error("missing repository", "hub")
        self.assertIsInstance(error, UsageError)
        self.assertEqual(str(error), "missing repository\nUsage: hub clone [-p] <REPO>")

    def testUsageErrorWithoutMessage(self):
        self.assertEqual(str(self.clone.usage_error(program="hub")), "Usage: hub clone [-p] <REPO>")

    def testHelpText(self):
        self.assertTrue(self.clone.help_text("hub").startswith("hub-clone(1) -- Clone a repository.\n===\n"))


if __name__ == "__main__":
    unittest.main()
