"""
Fixpoint Driver

This module runs a program repeatedly, feeding the host parameter produced
by one pass into the next, until two consecutive passes emit the same log.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import logging

from .builtins import HostState, standard_builtins
from .config import get_config
from .core import Environment, Interpreter, Node

logger = logging.getLogger(__name__)


def _configured_interpreter() -> Interpreter:
    config = get_config().interpreter
    return Interpreter(config.max_steps, config.max_recursion_depth)


@dataclass
class PassResult:
    """Outcome of one evaluation pass."""
    iteration: int
    parameter: int
    log: List[str]
    value: Any
    next_parameter: int


def make_environment(extra_builtins: Optional[Dict[str, Any]] = None) -> Environment:
    """
    Build a fresh environment holding the standard builtins.

    Args:
        extra_builtins: Additional globals; names must not clash

    Raises:
        ValueError: If a name is bound twice
    """
    env = Environment()
    for name, value in standard_builtins().items():
        env.bind_global(name, value)
    for name, value in (extra_builtins or {}).items():
        env.bind_global(name, value)
    return env


def run_pass(program: Node, parameter: int, extra_builtins: Optional[Dict[str, Any]] = None,
             interpreter: Optional[Interpreter] = None) -> Tuple[Any, HostState]:
    """
    Evaluate program once against a fresh environment and host state.

    Returns:
        The program's value and the host state it left behind
    """
    interpreter = interpreter or _configured_interpreter()
    interpreter.reset_tracker()
    state = HostState(parameter=parameter)
    value = interpreter.evaluate(program, make_environment(extra_builtins), state)
    return value, state


class FixpointCompiler:
    """
    Fixed-point compilation driver.

    Keeps the history of every pass so callers can inspect how the
    parameter and log evolved.
    """

    def __init__(self, max_iterations: Optional[int] = None,
                 extra_builtins: Optional[Dict[str, Any]] = None,
                 interpreter: Optional[Interpreter] = None):
        if max_iterations is None:
            max_iterations = get_config().driver.max_iterations
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.max_iterations = max_iterations
        self.extra_builtins = extra_builtins
        self.interpreter = interpreter or _configured_interpreter()
        self.passes: List[PassResult] = []
        self.converged = False

    def compile(self, program: Node) -> List[str]:
        """
        Iterate passes until the log stops changing.

        Returns:
            The converged log, or the last computed one if the budget ran out

        Raises:
            EvaluationError: From the first pass that fails
        """
        self.passes = []
        self.converged = False
        parameter = 0
        previous_log: Optional[List[str]] = None

        for iteration in range(1, self.max_iterations + 1):
            value, state = run_pass(program, parameter, self.extra_builtins, self.interpreter)
            self.passes.append(PassResult(iteration, parameter, list(state.log), value, state.parameter))
            logger.debug(f"Pass {iteration}: parameter {parameter} -> {state.parameter}, "
                         f"{len(state.log)} entries, {self.interpreter.step_count} steps")

            if state.log == previous_log:
                self.converged = True
                logger.info(f"Converged after {iteration} passes")
                return state.log

            previous_log = state.log
            parameter = state.parameter

        logger.warning(f"No fixed point within {self.max_iterations} passes, "
                       f"returning last log")
        return previous_log


def compile(program: Node, max_iterations: int = 5,
            builtins: Optional[Dict[str, Any]] = None) -> List[str]:
    """
    Compile a program to its fixed-point output log.

    Args:
        program: Tree to evaluate
        max_iterations: Maximum number of passes
        builtins: Extra globals on top of the standard set

    Returns:
        The emitted log
    """
    return FixpointCompiler(max_iterations, builtins).compile(program)
