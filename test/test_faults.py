# python
"""
Faults and entry point behavioral tests.

Scope
- Validate fault options, replacement and triggering (raise vs. render + exit).
- Validate rich rendering in plain mode.
- Validate invoke() exit statuses.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured by swapping the module consoles for in-memory ones.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from conduit import (
    Command,
    CommandException,
    FaultCode,
    HelpedCommand,
    Option,
    Pipeline,
    UnexpectedCommandError,
    UnknownOptionError,
    getdoc,
    invoke,
    trigger,
)


class Tool(HelpedCommand):
    """Run the tool."""

    __parameters__ = (
        Option("-n", "--name"),
    )

    name = None

    def run(self, context):
        return self.name


class Broken(Command):
    def execute(self, context):
        raise LookupError("nothing here")


def capture():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestFaults(TestCase):
    """Behavioral tests for CommandException and trigger()."""

    def testOptionsAreReadOnly(self):
        fault = UnknownOptionError("unknown option '-x'", code=FaultCode.UNKNOWN_OPTION)
        with self.assertRaises(TypeError):
            fault.options["code"] = FaultCode.MISSING_VALUE  # type: ignore[index]

    def testReplaceMergesOptionsAndKeepsCause(self):
        cause = ValueError("bad")
        fault = UnknownOptionError("unknown option '-x'", code=FaultCode.UNKNOWN_OPTION)
        fault.__cause__ = cause
        replaced = fault.__replace__(shell=False, hint="try -y")
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(replaced.message, fault.message)
        self.assertEqual(replaced.options["code"], FaultCode.UNKNOWN_OPTION)
        self.assertEqual(replaced.options["hint"], "try -y")
        self.assertIs(replaced.__cause__, cause)

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(UnknownOptionError) as caught:
            trigger(UnknownOptionError("unknown option '-x'"), shell=False, title="unknown option")
        self.assertEqual(caught.exception.options["title"], "unknown option")

    def testTriggerRendersAndExitsInShell(self):
        console = capture()
        with patch("conduit.faults.console", console):
            with self.assertRaises(SystemExit) as caught:
                trigger(
                    UnknownOptionError("unknown option '-x'", title="unknown option", code=FaultCode.UNKNOWN_OPTION),
                    shell=True,
                    colorful=False,
                )
        self.assertEqual(caught.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("Unknown Option", output)
        self.assertIn("unknown option '-x'", output)
        self.assertIn(str(FaultCode.UNKNOWN_OPTION.value), output)

    def testFancyRendering(self):
        console = capture()
        with patch("conduit.faults.console", console):
            with self.assertRaises(SystemExit):
                trigger(CommandException("broken", hint="fix it"), shell=True, fancy=True, colorful=False)
        output = console.file.getvalue()
        self.assertIn("broken", output)
        self.assertIn("fix it", output)

    def testTriggerRequiresFault(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testCodeNormalization(self):
        self.assertEqual(FaultCode.MISSING_VALUE.normalize(), str(FaultCode.MISSING_VALUE.value))

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_OPTION))
        with self.assertRaises(TypeError):
            getdoc(21111)

    def testUnexpectedErrorStatus(self):
        self.assertEqual(UnexpectedCommandError.status, 2)
        self.assertEqual(CommandException.status, 1)


class TestInvoke(TestCase):
    """Behavioral tests for the process entry point."""

    def setUp(self):
        self.pipeline = Pipeline.builder(Tool, "tool").build()

    def testReturnsResult(self):
        self.assertEqual(invoke(self.pipeline, None, "--name conduit"), "conduit")

    def testFaultPropagatesOutsideShell(self):
        with self.assertRaises(UnknownOptionError):
            invoke(self.pipeline, None, ["--nmae", "x"], shell=False)

    def testFaultExitsWithOneInShell(self):
        console = capture()
        with patch("conduit.faults.console", console):
            with self.assertRaises(SystemExit) as caught:
                invoke(self.pipeline, None, ["--nmae", "x"], colorful=False)
        self.assertEqual(caught.exception.code, 1)
        self.assertIn("tool", console.file.getvalue())

    def testUnexpectedErrorExitsWithTwoInShell(self):
        pipeline = Pipeline.builder(Broken, "broken").build()
        console = capture()
        with patch("conduit.faults.console", console):
            with self.assertRaises(SystemExit) as caught:
                invoke(pipeline, None, [], colorful=False)
        self.assertEqual(caught.exception.code, 2)
        self.assertIn("nothing here", console.file.getvalue())

    def testUnexpectedErrorPropagatesOutsideShell(self):
        pipeline = Pipeline.builder(Broken, "broken").build()
        with self.assertRaises(LookupError):
            invoke(pipeline, None, [], shell=False)

    def testHelpIsPrinted(self):
        console = capture()
        with patch("conduit.commands.console", console):
            self.assertIsNone(invoke(self.pipeline, None, ["-h"]))
        output = console.file.getvalue()
        self.assertIn("Usage: tool [options]", output)
        self.assertIn("Run the tool.", output)
        self.assertIn("-n NAME, --name NAME", output)


if __name__ == "__main__":
    unittest.main()
