#!/usr/bin/env python3
"""
Unit tests for the host builtins and host state.
"""

import unittest
from fixpoint import (
    Interpreter, HostState, DivisionByZero, UnsupportedArgument, HostError, EvaluationError,
    apply, call, var, const, seq, make_environment, arithmetic_builtins, standard_builtins
)


class TestReferenceBuiltins(unittest.TestCase):
    """Test cases for content, location, size, percent and resize."""

    def setUp(self):
        self.interpreter = Interpreter()
        self.env = make_environment()

    def run_ast(self, ast, parameter=0):
        state = HostState(parameter=parameter)
        return self.interpreter.evaluate(ast, self.env, state), state

    def test_content_appends_and_returns(self):
        value, state = self.run_ast(apply(var('content'), const("x")))
        self.assertEqual(value, "x")
        self.assertEqual(state.log, ["x"])

    def test_content_then_location(self):
        """Location after one emitted entry is 1."""
        program = seq(apply(var('content'), const("x")), apply(var('location'), const("anything")))
        value, state = self.run_ast(program)
        self.assertEqual(value, 1)
        self.assertEqual(state.log, ["x"])

    def test_content_nested_calls(self):
        program = apply(var('location'), apply(var('content'), const("x")))
        value, state = self.run_ast(program)
        self.assertEqual(value, 1)
        self.assertEqual(state.log, ["x"])

    def test_content_rejects_non_strings(self):
        for value in (1, True, None):
            with self.subTest(value=value):
                with self.assertRaises(UnsupportedArgument) as ctx:
                    self.run_ast(apply(var('content'), const(value)))
                self.assertEqual(ctx.exception.builtin, 'content')
                self.assertIsInstance(ctx.exception, HostError)
                self.assertIsInstance(ctx.exception, EvaluationError)

    def test_location_on_empty_log(self):
        value, _ = self.run_ast(apply(var('location'), const(0)))
        self.assertEqual(value, 0)

    def test_size_reads_parameter(self):
        value, _ = self.run_ast(apply(var('size'), const(0)), parameter=17)
        self.assertEqual(value, 17)

    def test_percent(self):
        program = seq(apply(var('content'), const("a")),
                      apply(var('content'), const("b")),
                      apply(var('content'), const("c")),
                      apply(var('content'), const("d")),
                      apply(var('content'), const("e")),
                      apply(var('percent'), const(0)))
        value, _ = self.run_ast(program, parameter=2)
        self.assertEqual(value, 2)

    def test_percent_truncates_toward_zero(self):
        program = seq(apply(var('content'), const("a")),
                      apply(var('content'), const("b")),
                      apply(var('content'), const("c")),
                      apply(var('percent'), const(0)))
        value, _ = self.run_ast(program, parameter=-2)
        self.assertEqual(value, -1)

    def test_percent_zero_parameter(self):
        with self.assertRaises(DivisionByZero) as ctx:
            self.run_ast(apply(var('percent'), const(0)), parameter=0)
        self.assertEqual(ctx.exception.builtin, 'percent')

    def test_resize_sets_parameter(self):
        value, state = self.run_ast(apply(var('resize'), const(9)), parameter=1)
        self.assertEqual(value, 9)
        self.assertEqual(state.parameter, 9)

    def test_resize_rejects_non_integers(self):
        for value in ("9", True):
            with self.subTest(value=value):
                with self.assertRaises(UnsupportedArgument):
                    self.run_ast(apply(var('resize'), const(value)))

    def test_boolean_constants(self):
        self.assertIs(self.run_ast(var('true'))[0], True)
        self.assertIs(self.run_ast(var('false'))[0], False)

    def test_standard_builtins_are_fresh(self):
        self.assertIsNot(standard_builtins()['content'], standard_builtins()['content'])


class TestArithmeticBuiltins(unittest.TestCase):
    """Test cases for the optional arithmetic and string helpers."""

    def setUp(self):
        self.interpreter = Interpreter()
        self.env = make_environment(arithmetic_builtins())
        self.state = HostState()

    def run_ast(self, ast):
        return self.interpreter.evaluate(ast, self.env, self.state)

    def test_binary_operations(self):
        cases = [
            ('add', 4, 3, 7),
            ('sub', 4, 3, 1),
            ('mul', 4, 3, 12),
            ('eq', 4, 4, True),
            ('lt', 4, 3, False),
            ('concat', "ab", "cd", "abcd"),
        ]
        for name, a, b, expected in cases:
            with self.subTest(op=name):
                self.assertEqual(self.run_ast(call(var(name), const(a), const(b))), expected)

    def test_unary_operations(self):
        self.assertIs(self.run_ast(apply(var('is_zero'), const(0))), True)
        self.assertIs(self.run_ast(apply(var('is_zero'), const(2))), False)
        self.assertEqual(self.run_ast(apply(var('show'), const(42))), "42")

    def test_type_mismatch(self):
        bad = [
            call(var('add'), const(1), const("2")),
            call(var('concat'), const(1), const("2")),
            apply(var('show'), const("x")),
            apply(var('is_zero'), const(False)),
        ]
        for ast in bad:
            with self.subTest(ast=str(ast)):
                with self.assertRaises(UnsupportedArgument):
                    self.run_ast(ast)

    def test_helpers_leave_host_state_alone(self):
        self.run_ast(call(var('add'), const(1), const(2)))
        self.assertEqual(self.state, HostState())


if __name__ == '__main__':
    unittest.main()
