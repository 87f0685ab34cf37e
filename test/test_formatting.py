# python
"""
Help formatter behavioral tests.

Scope
- Validate usage lines (parents, options marker, positional arity forms, subcommands).
- Validate the help page layout, sorting, wrapping and value hints.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from conduit import Command, HelpedCommand, HelpFormatter, Option, Pipeline, Positional, format_positional


class Tested(HelpedCommand):
    """Test command description."""

    __parameters__ = (
        Option("-v", field="value", descr="Some description."),
        Option("-f", "--flag", store_true=True),
        Positional("N", descr="Positional argument description."),
    )

    def run(self, context): ...


class Git(Command):
    def execute(self, context): ...


class Remote(Command):
    """Manage remotes."""

    __parameters__ = (
        Positional("NAME"),
        Positional("URLS", type=list[str], nargs=-1),
    )

    def execute(self, context): ...


class Counted(Command):
    __parameters__ = (
        Option("-n", field="count", type=int, descr="Count."),
        Option("-q", store_true=True, descr="Quiet."),
        Positional("WORDS", type=list[str], nargs=-1),
    )

    def execute(self, context): ...


class Wordy(Command):
    __parameters__ = (
        Positional("N", descr="alpha beta gamma delta epsilon"),
        Option("--long-option", descr="Described."),
    )

    def execute(self, context): ...


class TestUsage(TestCase):
    """Behavioral tests for usage lines."""

    def setUp(self):
        root = Pipeline.builder(Git, "git")
        root.subcommand(Remote, "remote")
        self.pipeline = root.build()
        self.formatter = HelpFormatter()

    def testRootUsage(self):
        self.assertEqual(self.formatter.format_usage(self.pipeline), "Usage: git {cmd}")

    def testChildUsageIncludesParents(self):
        usage = self.formatter.format_usage(self.pipeline.child("remote"))
        self.assertEqual(usage, "Usage: git remote NAME URLS [URLS..]")

    def testPositionalForms(self):
        self.assertEqual(format_positional(Positional("A", nargs=2)), "A A")
        self.assertEqual(format_positional(Positional("M", nargs=0)), "[M..]")
        self.assertEqual(format_positional(Positional("U", nargs=-2)), "U U [U..]")


class TestHelp(TestCase):
    """Behavioral tests for help pages."""

    def testLayout(self):
        pipeline = Pipeline.builder(Tested, "test").build()
        self.assertEqual(HelpFormatter().format_help(pipeline), "\n".join((
            "Usage: test [options] N",
            "",
            "Test command description.",
            "",
            "Positional arguments:",
            "N           Positional argument description.",
            "",
            "Options:",
            "-f, --flag",
            "-h, --help  Show this help message.",
            "-v VALUE    Some description.",
        )))

    def testCommandsSection(self):
        root = Pipeline.builder(Git, "git")
        root.subcommand(Remote, "remote")
        self.assertEqual(HelpFormatter().format_help(root.build()), "\n".join((
            "Usage: git {cmd}",
            "",
            "Commands:",
            "remote      Manage remotes.",
        )))

    def testWrapping(self):
        pipeline = Pipeline.builder(Wordy, "wordy").build()
        lines = HelpFormatter(width=30).format_help(pipeline).split("\n")
        self.assertIn("N           alpha beta gamma", lines)
        self.assertIn("            delta epsilon", lines)
        index = lines.index("--long-option LONG_OPTION")
        self.assertEqual(lines[index + 1], "            Described.")

    def testHints(self):
        pipeline = Pipeline.builder(Counted, "counted").build()
        lines = HelpFormatter(hints=True).format_help(pipeline).split("\n")
        self.assertIn("-n COUNT    Count. (integer: 0)", lines)
        self.assertIn("-q          Quiet.", lines)
        self.assertIn("WORDS       (any string)", lines)

    def testValidation(self):
        with self.assertRaises(ValueError):
            HelpFormatter(width=10, indent=12)
        with self.assertRaises(ValueError):
            HelpFormatter(indent=2)
        with self.assertRaises(TypeError):
            HelpFormatter(width="wide")


if __name__ == "__main__":
    unittest.main()
