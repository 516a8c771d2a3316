"""
Fixpoint Core Interpreter

This module implements the tree-walking evaluator for the Fixpoint
expression language: a small lambda calculus with closures, a
self-reference primitive, conditionals and host-provided builtins.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar
import json
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Variables are plain identifiers
Variable = str


class Node:
    """
    AST node of the Fixpoint language.

    Each node is one of:
    - 'lambda'  value=param, children=(body,)
    - 'selfref' the fixpoint primitive
    - 'apply'   children=(function, argument)
    - 'var'     value=variable name
    - 'const'   value=an already built runtime value
    - 'if'      children=(condition, then, else)

    Nodes are never mutated once built.
    """

    __slots__ = ('node_type', 'value', 'children')

    def __init__(self, node_type: str, value: Any = None, children: Tuple['Node', ...] = ()):
        self.node_type = node_type
        self.value = value
        self.children = tuple(children)

    def __repr__(self):
        if self.children:
            children_repr = ', '.join(repr(child) for child in self.children)
            return f"Node({self.node_type}, {self.value!r}, [{children_repr}])"
        return f"Node({self.node_type}, {self.value!r})"


# Runtime values. bool, int and str are represented by the Python natives.

class Closure:
    """A lambda paired with the environment snapshot taken when it was created."""

    __slots__ = ('env', 'param', 'body')

    def __init__(self, env: 'Environment', param: Variable, body: Node):
        self.env = env
        self.param = param
        self.body = body

    def __repr__(self):
        return f"<closure {self.param} -> {pretty_print_ast(self.body)}>"


class SelfRefMarker:
    """Value produced by evaluating the self-reference primitive."""

    __slots__ = ()

    def __repr__(self):
        return "<self>"


SELF_REF = SelfRefMarker()


class Builtin:
    """
    Host-provided function.

    func receives the argument value and the host state and returns the
    result value. It may raise EvaluationError subclasses.
    """

    __slots__ = ('name', 'func')

    def __init__(self, name: str, func: Callable[[Any, Any], Any]):
        self.name = name
        self.func = func

    def __call__(self, argument: Any, state: Any) -> Any:
        return self.func(argument, state)

    def __repr__(self):
        return f"<builtin {self.name}>"


class BuiltinValue:
    """Opaque host constant. The evaluator passes it around untouched."""

    __slots__ = ('payload',)

    def __init__(self, payload: Any):
        self.payload = payload

    def __eq__(self, other):
        return isinstance(other, BuiltinValue) and self.payload == other.payload

    def __hash__(self):
        return hash(('BuiltinValue', self.payload))

    def __repr__(self):
        return f"<value {self.payload!r}>"


# Errors

class EvaluationError(Exception):
    """Base class for errors raised while evaluating a program."""


class NotInScope(EvaluationError):
    def __init__(self, variable: Variable):
        super().__init__(f"Variable not in scope: {variable}")
        self.variable = variable


class NotACallableValue(EvaluationError):
    def __init__(self, value: Any):
        super().__init__(f"Value is not callable: {value!r}")
        self.value = value


class NotABoolValue(EvaluationError):
    def __init__(self, value: Any):
        super().__init__(f"Condition is not a boolean: {value!r}")
        self.value = value


class StepLimitExceeded(EvaluationError):
    def __init__(self, limit: int):
        super().__init__(f"Maximum step count exceeded: {limit}")
        self.limit = limit


class RecursionLimitExceeded(EvaluationError):
    def __init__(self, limit: Optional[int]):
        if limit is None:
            super().__init__("Python recursion limit reached during evaluation")
        else:
            super().__init__(f"Maximum recursion depth exceeded: {limit}")
        self.limit = limit


class Environment:
    """
    Mapping from variables to values with scoped temporary rebinding.

    Globals (builtins) are installed once with bind_global. Everything else
    goes through with_temporary_binding, which always restores the previous
    state of the variable, whether the nested evaluation returns or raises.
    """

    def __init__(self, bindings: Optional[Dict[Variable, Any]] = None):
        self._bindings: Dict[Variable, Any] = dict(bindings) if bindings else {}

    def lookup(self, variable: Variable) -> Optional[Any]:
        return self._bindings.get(variable)

    def bind_global(self, variable: Variable, value: Any) -> None:
        """
        Install a binding during initialization.

        Raises:
            ValueError: If the variable is already bound
        """
        if variable in self._bindings:
            raise ValueError(f"Variable already bound: {variable}")
        self._bindings[variable] = value

    @contextmanager
    def temporary_binding(self, variable: Variable, value: Any) -> Iterator['Environment']:
        """Bind variable for the duration of the with block."""
        had_binding = variable in self._bindings
        saved = self._bindings.get(variable)
        self._bindings[variable] = value
        try:
            yield self
        finally:
            if had_binding:
                self._bindings[variable] = saved
            else:
                del self._bindings[variable]

    def with_temporary_binding(self, variable: Variable, value: Any,
                               body: Callable[['Environment'], T]) -> T:
        """
        Call body with variable bound to value, then restore the old binding.

        Args:
            variable: Variable to rebind
            value: Value installed while body runs
            body: Callable receiving this environment

        Returns:
            Whatever body returns
        """
        with self.temporary_binding(variable, value) as env:
            return body(env)

    def snapshot(self) -> 'Environment':
        """Independent copy used for closure capture."""
        return Environment(self._bindings)

    def names(self) -> List[Variable]:
        return list(self._bindings)

    def as_dict(self) -> Dict[Variable, Any]:
        return dict(self._bindings)

    def __contains__(self, variable: Variable) -> bool:
        return variable in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self):
        return f"Environment({sorted(self._bindings)})"


class Interpreter:
    """
    Recursive evaluator for Fixpoint trees.

    Features:
    - Applicative order: the argument of an application is evaluated
      before its function
    - Closures capture a copy of the environment
    - Self-reference unrolling without memoization
    - Step and depth counting with optional limits
    """

    # Parameter of the delayed self-application closure
    UNROLL_PARAM = '%self-arg'

    def __init__(self, max_steps: Optional[int] = None, max_depth: Optional[int] = None):
        self.max_steps = max_steps
        self.max_depth = max_depth
        self.step_count = 0

    def reset_tracker(self) -> None:
        self.step_count = 0

    def evaluate(self, node: Node, env: Environment, state: Any, depth: int = 0) -> Any:
        """
        Evaluate a node in the given environment.

        Args:
            node: The AST node to evaluate
            env: Variable bindings
            state: Host state handed to builtins
            depth: Current recursion depth

        Returns:
            The resulting runtime value

        Raises:
            EvaluationError: On any evaluation failure
            ValueError: If the node is malformed
        """
        try:
            return self._evaluate(node, env, state, depth)
        except RecursionError as e:
            raise RecursionLimitExceeded(None) from e

    def _check_limits(self, depth: int) -> None:
        """Check if resource limits have been exceeded."""
        if self.max_depth is not None and depth > self.max_depth:
            raise RecursionLimitExceeded(self.max_depth)

        if self.max_steps is not None and self.step_count > self.max_steps:
            raise StepLimitExceeded(self.max_steps)

    def _evaluate(self, node: Node, env: Environment, state: Any, depth: int) -> Any:
        self.step_count += 1
        self._check_limits(depth)

        if node.node_type == 'const':
            return node.value

        elif node.node_type == 'var':
            if node.value not in env:
                raise NotInScope(node.value)
            return env.lookup(node.value)

        elif node.node_type == 'lambda':
            return Closure(env.snapshot(), node.value, node.children[0])

        elif node.node_type == 'selfref':
            return SELF_REF

        elif node.node_type == 'apply':
            function_node, argument_node = node.children
            argument = self._evaluate(argument_node, env, state, depth + 1)
            function = self._evaluate(function_node, env, state, depth + 1)
            return self._apply(function, argument, env, state, depth)

        elif node.node_type == 'if':
            cond_node, then_node, else_node = node.children
            condition = self._evaluate(cond_node, env, state, depth + 1)
            if not isinstance(condition, bool):
                raise NotABoolValue(condition)
            return self._evaluate(then_node if condition else else_node, env, state, depth + 1)

        else:
            raise ValueError(f"Unknown node type: {node.node_type}")

    def _apply(self, function: Any, argument: Any, env: Environment, state: Any, depth: int) -> Any:
        if isinstance(function, Closure):
            return function.env.with_temporary_binding(
                function.param, argument,
                lambda closure_env: self._evaluate(function.body, closure_env, state, depth + 1))

        if isinstance(function, Builtin):
            return function(argument, state)

        if function is SELF_REF:
            logger.debug(f"Unrolling self reference at depth {depth}")
            return self._evaluate(self._unroll(argument), env, state, depth + 1)

        raise NotACallableValue(function)

    def _unroll(self, argument: Any) -> Node:
        """
        Rebuild the self application with the argument in function position.

        The argument receives a closure standing for the original
        application; applying that closure to v re-evaluates
        (self f) v, so the next unrolling only happens on demand.
        """
        again = apply(apply(self_ref(), const(argument)), var(self.UNROLL_PARAM))
        delayed = Closure(Environment(), self.UNROLL_PARAM, again)
        return apply(const(argument), const(delayed))


def evaluate(node: Node, env: Environment, state: Any) -> Any:
    """Evaluate node with a fresh interpreter without step or depth limits."""
    return Interpreter().evaluate(node, env, state)


# Helper functions for creating AST nodes
def lam(param: Variable, body: Node) -> Node:
    """Create a lambda node."""
    return Node('lambda', param, (body,))

def self_ref() -> Node:
    """Create a self-reference node."""
    return Node('selfref')

def apply(function: Node, argument: Node) -> Node:
    """Create an application node."""
    return Node('apply', None, (function, argument))

def var(name: Variable) -> Node:
    """Create a variable reference node."""
    return Node('var', name)

def const(value: Any) -> Node:
    """Create a literal node."""
    return Node('const', value)

def if_expr(condition: Node, then_expr: Node, else_expr: Node) -> Node:
    """Create an if expression node."""
    return Node('if', None, (condition, then_expr, else_expr))

def call(function: Node, *args: Node) -> Node:
    """Apply a curried function to several arguments, left to right."""
    result = function
    for arg in args:
        result = apply(result, arg)
    return result

def seq(first: Node, *rest: Node) -> Node:
    """
    Evaluate expressions in order and return the value of the last one.

    Relies on arguments being evaluated before functions:
    (lambda _ rest) first runs first, then rest.
    """
    if not rest:
        return first
    return apply(lam('_', seq(*rest)), first)


def iter_nodes(ast: Node) -> Iterator[Tuple[Optional[Node], Optional[int], Node]]:
    """
    Generator that yields (parent, child_idx, node) for every node in the AST.

    Depth-first, parents before children.
    """
    def _traverse(node: Node, parent: Optional[Node] = None, child_idx: Optional[int] = None):
        yield (parent, child_idx, node)
        for idx, child in enumerate(getattr(node, 'children', ())):
            yield from _traverse(child, node, idx)

    yield from _traverse(ast)


def pretty_print_ast(node: Node) -> str:
    """
    Render an AST node as Lisp-style code.

    Args:
        node: The AST node to render

    Returns:
        A string representation in Lisp syntax
    """
    if node.node_type == 'const':
        value = node.value
        if isinstance(value, str):
            return json.dumps(value)
        elif isinstance(value, bool):
            return 'true' if value else 'false'
        elif isinstance(value, int):
            return str(value)
        else:
            return repr(value)

    elif node.node_type == 'var':
        return str(node.value)

    elif node.node_type == 'selfref':
        return 'self'

    elif node.node_type == 'lambda':
        return f"(lambda {node.value} {pretty_print_ast(node.children[0])})"

    elif node.node_type == 'apply':
        function, argument = node.children
        return f"({pretty_print_ast(function)} {pretty_print_ast(argument)})"

    elif node.node_type == 'if':
        cond, then_expr, else_expr = (pretty_print_ast(child) for child in node.children)
        return f"(if {cond} {then_expr} {else_expr})"

    else:
        return f"(UNKNOWN-{node.node_type} {node.value})"
