"""
Fixpoint: an embedded lambda-calculus evaluator with a fixed-point driver.

Programs are built as trees, evaluated against host builtins that read and
write a per-pass host state, and re-run until their output log stabilizes.
"""

from .core import (
    Node, Interpreter, Environment, Closure, Builtin, BuiltinValue, SelfRefMarker, SELF_REF,
    EvaluationError, NotInScope, NotACallableValue, NotABoolValue, StepLimitExceeded, RecursionLimitExceeded,
    evaluate, lam, self_ref, apply, var, const, if_expr, call, seq, pretty_print_ast
)
from .builtins import HostState, HostError, DivisionByZero, UnsupportedArgument, standard_builtins, arithmetic_builtins
from .driver import FixpointCompiler, PassResult, compile, make_environment, run_pass
from .verify import verify_ast

__version__ = "0.1.0"
__all__ = [
    "Node", "Interpreter", "Environment", "Closure", "Builtin", "BuiltinValue", "SelfRefMarker", "SELF_REF",
    "EvaluationError", "NotInScope", "NotACallableValue", "NotABoolValue", "StepLimitExceeded", "RecursionLimitExceeded",
    "evaluate", "lam", "self_ref", "apply", "var", "const", "if_expr", "call", "seq", "pretty_print_ast",
    "HostState", "HostError", "DivisionByZero", "UnsupportedArgument", "standard_builtins", "arithmetic_builtins",
    "FixpointCompiler", "PassResult", "compile", "make_environment", "run_pass", "verify_ast"
]
