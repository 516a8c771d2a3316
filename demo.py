#!/usr/bin/env python3
"""
Fixpoint Demo

This script demonstrates the evaluator and the fixed-point driver
with the bundled sample programs.
"""

from fixpoint import (
    FixpointCompiler, HostState, Interpreter, EvaluationError,
    apply, const, if_expr, var, make_environment, arithmetic_builtins, pretty_print_ast
)
from fixpoint.config import setup_logging
from fixpoint.programs import factorial_function, page_numbers


def demo_evaluator():
    """Evaluate a few expressions directly."""

    print("Fixpoint Demo - Evaluator")
    print("=" * 50)

    interpreter = Interpreter()
    env = make_environment(arithmetic_builtins())

    examples = [
        ("Factorial", apply(factorial_function(), const(4))),
        ("Conditional", if_expr(var('true'), const("yes"), const("no"))),
        ("Bad condition", if_expr(const(1), const("a"), const("b"))),
        ("Unbound", var('undefined_var')),
    ]

    for name, ast in examples:
        print(f"\n{name}: {pretty_print_ast(ast)}")
        try:
            result = interpreter.evaluate(ast, env, HostState())
            print(f"   Result: {result!r}")
        except EvaluationError as e:
            print(f"   Error: {e}")


def demo_fixed_point():
    """Show the passes a self-referential document goes through."""

    print("\nFixpoint Demo - Fixed-Point Driver")
    print("=" * 50)

    compiler = FixpointCompiler(10, arithmetic_builtins())
    log = compiler.compile(page_numbers())

    for result in compiler.passes:
        print(f"Pass {result.iteration} (parameter={result.parameter}): {result.log}")

    print(f"\nConverged: {compiler.converged}")
    print("Output:")
    for line in log:
        print(f"   {line}")


if __name__ == "__main__":
    setup_logging("WARNING")
    demo_evaluator()
    demo_fixed_point()
