"""
Process adapter behavioral tests (parse_args).

Scope
- Validate argv sources: sys.argv, shell-like strings, iterables.
- Validate program-name handling and the empty invocation fault.
- Validate fault surfacing in plain and shell modes.

Conventions
- Test method names follow CamelCase per project convention.
- sys.argv is patched, never read from the real process.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argscan import ConfigBuilder, Exact, Less, More, parse_args
from argscan.faults import EmptyInvocationError, UnknownOptionError, UnknownSubcommandError


class TestParseArgs(TestCase):
    """Behavioral tests for the argv adapter."""

    def setUp(self):
        self.config = (
            ConfigBuilder()
            .add_option("output", "o", "output", Exact(1))
            .add_long_option("include", "include", More(0))
            .add_short_flag("verbose", "v")
            .add_subcommand("sub", Less(3))
            .build()
        )

    def testReadsSysArgv(self):
        with mock.patch.object(sys, "argv", ["/usr/bin/tool", "-v", "file"]):
            result = parse_args(self.config)
        self.assertEqual(result["verbose"], [])
        self.assertEqual(result["/usr/bin/tool"], ["file"])
        self.assertEqual(result.program, "/usr/bin/tool")

    def testSplitsShellString(self):
        result = parse_args(self.config, "tool --output 'my file.txt' sub 5arg 6arg 7arg")
        self.assertEqual(result["output"], ["my file.txt"])
        self.assertEqual(result["sub"], ["5arg", "6arg"])
        self.assertEqual(result["tool"], ["7arg"])

    def testAcceptsIterable(self):
        result = parse_args(self.config, ("tool", "--include", "a", "b"))
        self.assertEqual(result["include"], ["a", "b"])
        self.assertIsNone(result["output"])
        self.assertIsNone(result["sub"])

    def testRejectsNonStringItems(self):
        with self.assertRaises(TypeError):
            parse_args(self.config, ["tool", 1])

    def testRejectsOtherArgvTypes(self):
        with self.assertRaises(TypeError):
            parse_args(self.config, 42)

    def testEmptyInvocation(self):
        with self.assertRaises(EmptyInvocationError):
            parse_args(self.config, [])
        with self.assertRaises(EmptyInvocationError):
            parse_args(self.config, "")

    def testFaultCarriesProgramLabel(self):
        with self.assertRaises(UnknownOptionError) as context:
            parse_args(self.config, ["/usr/bin/tool", "-z"])
        self.assertEqual(context.exception.program, "tool")
        self.assertEqual(context.exception.token, "-z")

    def testStrictPositionalsForwarded(self):
        with self.assertRaises(UnknownSubcommandError):
            parse_args(self.config, ["tool", "nope"], positionals=False)

    def testShellModeExits(self):
        stream = io.StringIO()
        with mock.patch("argscan.faults.console", Console(file=stream, width=120, color_system=None)):
            with self.assertRaises(SystemExit) as context:
                parse_args(self.config, ["tool", "-z"], shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("unknown option '-z'", stream.getvalue())


if __name__ == "__main__":
    unittest.main()
