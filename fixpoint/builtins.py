"""
Fixpoint Host Builtins

This module defines the host state threaded through every evaluation pass
and the builtin functions programs use to read and write it.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List
import logging

from .core import Builtin, EvaluationError

logger = logging.getLogger(__name__)


@dataclass
class HostState:
    """State owned by a single evaluation pass."""
    parameter: int = 0
    log: List[str] = field(default_factory=list)

    def emit(self, text: str) -> None:
        self.log.append(text)


class HostError(EvaluationError):
    """Base class for failures raised by builtins rather than the evaluator."""


class DivisionByZero(HostError):
    def __init__(self, builtin: str):
        super().__init__(f"Division by zero in builtin '{builtin}'")
        self.builtin = builtin


class UnsupportedArgument(HostError):
    def __init__(self, builtin: str, value: Any):
        super().__init__(f"Builtin '{builtin}' does not accept {value!r}")
        self.builtin = builtin
        self.value = value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _truncating_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


# Reference builtins

def _content(argument: Any, state: HostState) -> str:
    if not isinstance(argument, str):
        raise UnsupportedArgument('content', argument)
    state.emit(argument)
    return argument


def _location(argument: Any, state: HostState) -> int:
    return len(state.log)


def _size(argument: Any, state: HostState) -> int:
    return state.parameter


def _percent(argument: Any, state: HostState) -> int:
    if state.parameter == 0:
        raise DivisionByZero('percent')
    return _truncating_div(len(state.log), state.parameter)


def _resize(argument: Any, state: HostState) -> int:
    if not _is_int(argument):
        raise UnsupportedArgument('resize', argument)
    if argument != state.parameter:
        logger.debug(f"Parameter resized: {state.parameter} -> {argument}")
    state.parameter = argument
    return argument


def standard_builtins() -> Dict[str, Any]:
    """
    Build the reference set of globals.

    Returns:
        Mapping of global name to value, ready for Environment.bind_global
    """
    return {
        'content': Builtin('content', _content),
        'location': Builtin('location', _location),
        'size': Builtin('size', _size),
        'percent': Builtin('percent', _percent),
        'resize': Builtin('resize', _resize),
        'true': True,
        'false': False,
    }


# Extension set: pure curried helpers that never touch host state

def _curried(name: str, check: Callable[[Any], bool], func: Callable[[Any, Any], Any]) -> Builtin:
    def first(a, state):
        if not check(a):
            raise UnsupportedArgument(name, a)

        def second(b, state):
            if not check(b):
                raise UnsupportedArgument(name, b)
            return func(a, b)

        return Builtin(f"{name} {a!r}", second)

    return Builtin(name, first)


def _unary(name: str, check: Callable[[Any], bool], func: Callable[[Any], Any]) -> Builtin:
    def call(a, state):
        if not check(a):
            raise UnsupportedArgument(name, a)
        return func(a)

    return Builtin(name, call)


def arithmetic_builtins() -> Dict[str, Builtin]:
    """Integer and string helpers for programs that compute their output."""
    is_str = lambda v: isinstance(v, str)
    return {
        'add': _curried('add', _is_int, lambda a, b: a + b),
        'sub': _curried('sub', _is_int, lambda a, b: a - b),
        'mul': _curried('mul', _is_int, lambda a, b: a * b),
        'eq': _curried('eq', _is_int, lambda a, b: a == b),
        'lt': _curried('lt', _is_int, lambda a, b: a < b),
        'concat': _curried('concat', is_str, lambda a, b: a + b),
        'is_zero': _unary('is_zero', _is_int, lambda a: a == 0),
        'show': _unary('show', _is_int, str),
    }
