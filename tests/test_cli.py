#!/usr/bin/env python3
"""
Tests for the fixpoint-run command.
"""

import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from fixpoint.cli import run_main
from fixpoint.programs import PROGRAMS, factorial


class TestCLI(unittest.TestCase):

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = run_main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_list(self):
        code, out, _ = self.run_cli("--list")
        self.assertEqual(code, 0)
        for name in ("factorial", "page_numbers", "progress"):
            self.assertIn(name, out)

    def test_run_plain(self):
        code, out, err = self.run_cli("factorial", "--log-level", "ERROR")
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["120"])
        self.assertIn("converged after 2 passes", err)

    def test_run_json(self):
        code, out, _ = self.run_cli("page_numbers", "--json", "--verify", "--log-level", "ERROR")
        self.assertEqual(code, 0)
        result = json.loads(out)
        self.assertTrue(result["converged"])
        self.assertEqual(result["passes"], 4)
        self.assertEqual(result["parameter"], 5)
        self.assertEqual(result["log"][1], "Total entries: 5")

    def test_budget_exhausted(self):
        code, out, _ = self.run_cli("page_numbers", "--json", "--max-iterations", "1", "--log-level", "ERROR")
        self.assertEqual(code, 0)
        result = json.loads(out)
        self.assertFalse(result["converged"])
        self.assertEqual(result["parameter"], 4)

    def test_deep_recursion_exits_with_error(self):
        with mock.patch.dict(PROGRAMS, {"factorial": lambda: factorial(1000)}):
            code, out, err = self.run_cli("factorial", "--log-level", "ERROR")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("recursion", err.lower())

    def test_log_level_case_insensitive(self):
        code, out, _ = self.run_cli("factorial", "--log-level", "error")
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["120"])

    def test_unknown_log_level_rejected(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli("factorial", "--log-level", "LOUD")
        self.assertEqual(ctx.exception.code, 2)

    def test_missing_program(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli()
        self.assertEqual(ctx.exception.code, 2)


if __name__ == '__main__':
    unittest.main()
