"""
Usage rendering behavioral tests.

Scope
- Validate the USAGE line (program name, section markers, positional synopsis).
- Validate section grouping, declaration order and verbatim definitions.
- Validate explicit help display with and without an exit status.

Conventions
- Test method names follow CamelCase per project convention.
- Definitions avoid tabs so captured output is independent of tab expansion.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from declargs import Registry, MissingPositionalError
from declargs.definitions import parse
from declargs.descriptors import Descriptor
from declargs.usage import render, synopsis


class TestRender(TestCase):
    """Behavioral tests for usage.render()."""

    def testFullLayout(self):
        descriptors = [
            Descriptor(parse("-v, --verbose")),
            Descriptor(parse("<add> item")),
            Descriptor(parse("input"), position=0),
            Descriptor(parse("-x, --xrays n")),
            Descriptor(parse("[output]"), position=1),
            Descriptor(parse("'list'")),
        ]
        text = render(descriptors, "tool", header="demo tool")
        self.assertEqual(text.plain, "\n".join((
            "demo tool",
            "USAGE: tool COMMANDS OPTIONS input [output]",
            "",
            "COMMANDS:",
            "  <add> item",
            "  'list'",
            "",
            "OPTIONS:",
            "  -v, --verbose",
            "  -x, --xrays n",
            "",
            "ARGUMENTS:",
            "  input",
            "  [output]",
        )))

    def testEmptySectionsAreOmitted(self):
        text = render([Descriptor(parse("-v"))], "tool")
        self.assertEqual(text.plain, "USAGE: tool OPTIONS\n\nOPTIONS:\n  -v")

    def testNoDescriptors(self):
        self.assertEqual(render([], "tool").plain, "USAGE: tool")

    def testCustomTemplates(self):
        messages = {"usage": "USO", "commands": "COMANDOS", "options": "OPCIONES", "arguments": "ARGUMENTOS"}
        text = render([Descriptor(parse("-v"))], "tool", messages=messages)
        self.assertTrue(text.plain.startswith("USO: tool OPCIONES\n\nOPCIONES:"))

    def testMarkupIsNotInterpreted(self):
        text = render([Descriptor(parse("--style [bold]"))], "tool")
        self.assertIn("  --style [bold]", text.plain)

    def testSynopsis(self):
        self.assertEqual(synopsis(Descriptor(parse("input"))), "input")
        self.assertEqual(synopsis(Descriptor(parse("[output]"))), "[output]")


class TestRegistryUsage(TestCase):
    """Behavioral tests for Registry.usage() and fatal-path usage."""

    def setUp(self):
        self.stream = io.StringIO()
        self.cli = Registry("demo tool", prog="tool", console=Console(file=self.stream, width=200))
        self.cli.define("-h, --help", lambda match: self.cli.usage(0))
        self.cli.define("input")

    def testHelpExitsWithCallerStatus(self):
        with self.assertRaises(SystemExit) as context:
            self.cli.scan(["tool", "--help"])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("demo tool\nUSAGE: tool OPTIONS input\n", self.stream.getvalue())

    def testUsageWithoutStatusReturns(self):
        self.cli.usage()
        self.assertIn("ARGUMENTS:\n  input\n", self.stream.getvalue())

    def testFatalConditionPrintsUsageThenFault(self):
        with self.assertRaises(SystemExit) as context:
            self.cli.scan(["tool"])
        self.assertEqual(context.exception.code, 1)
        output = self.stream.getvalue()
        self.assertLess(output.index("USAGE: tool"), output.index("tool: ERROR: Missing or invalid value for 'input'"))

    def testNonShellModeDoesNotPrint(self):
        stream = io.StringIO()
        cli = Registry(prog="tool", shell=False, console=Console(file=stream, width=200))
        cli.define("input")
        with self.assertRaises(MissingPositionalError):
            cli.scan(["tool"])
        self.assertEqual(stream.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
