"""
Fixpoint Verification System

This module implements structural checks for program trees, catching
malformed nodes and unbound variables before a program is compiled.
Checks are purely syntactic: nothing is evaluated and no types are inferred.
"""

from typing import Iterable, List, Set, Tuple

from .core import Node, iter_nodes

# Expected number of children per node type
NODE_ARITIES = {
    'lambda': 1,
    'selfref': 0,
    'apply': 2,
    'var': 0,
    'const': 0,
    'if': 3,
}


def check_node_types(ast: Node) -> Tuple[bool, List[str]]:
    """
    Check that every node has a known type and the right number of children.

    Args:
        ast: The AST to check

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []

    for parent, child_idx, node in iter_nodes(ast):
        if not isinstance(node, Node):
            errors.append(f"Child {child_idx} of {parent.node_type} is not a Node: {node!r}")
            continue

        if node.node_type not in NODE_ARITIES:
            errors.append(f"Unknown node type: {node.node_type}")
            continue

        expected = NODE_ARITIES[node.node_type]
        if len(node.children) != expected:
            errors.append(f"Node '{node.node_type}' expects {expected} children, got {len(node.children)}")

        if node.node_type in ('lambda', 'var') and not isinstance(node.value, str):
            errors.append(f"Node '{node.node_type}' needs a variable name, got {node.value!r}")

    return len(errors) == 0, errors


def check_free_vars(ast: Node, bound: Iterable[str] = ()) -> Tuple[bool, List[str]]:
    """
    Check that all variable references are bound by an enclosing lambda
    or appear in the given globals.

    Args:
        ast: The AST to check
        bound: Names available globally (usually the builtin names)

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []

    def check_scope(node: Node, bound_vars: Set[str]) -> None:
        if node.node_type == 'var':
            if node.value not in bound_vars:
                errors.append(f"Unbound variable: {node.value}")
            return

        if node.node_type == 'lambda':
            for child in node.children:
                check_scope(child, bound_vars | {node.value})
            return

        for child in node.children:
            check_scope(child, bound_vars)

    check_scope(ast, set(bound))
    return len(errors) == 0, errors


def check_depth(ast: Node, max_depth: int = 200) -> Tuple[bool, List[str]]:
    """
    Check that the AST depth doesn't exceed the maximum allowed.

    Args:
        ast: The AST to check
        max_depth: Maximum allowed depth

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []

    def get_depth(node: Node) -> int:
        if not node.children:
            return 1
        return 1 + max(get_depth(child) for child in node.children)

    actual_depth = get_depth(ast)

    if actual_depth > max_depth:
        errors.append(f"AST depth {actual_depth} exceeds maximum allowed depth {max_depth}")

    return len(errors) == 0, errors


def check_node_count(ast: Node, max_nodes: int = 10000) -> Tuple[bool, List[str]]:
    """Check that the AST doesn't have too many nodes."""
    errors = []

    node_count = sum(1 for _ in iter_nodes(ast))

    if node_count > max_nodes:
        errors.append(f"AST has {node_count} nodes, exceeds maximum allowed {max_nodes}")

    return len(errors) == 0, errors


def verify_ast(ast: Node, bound: Iterable[str] = (), max_depth: int = 200,
               max_nodes: int = 10000) -> Tuple[bool, List[str]]:
    """
    Perform comprehensive verification of an AST.

    Free variables, depth and size are only checked once the node
    structure itself is sound.

    Args:
        ast: The AST to verify
        bound: Globally bound names
        max_depth: Maximum allowed depth
        max_nodes: Maximum allowed number of nodes

    Returns:
        Tuple of (is_valid, error_messages)
    """
    if not isinstance(ast, Node):
        return False, ["AST root must be a Node"]

    is_valid, errors = check_node_types(ast)
    if not is_valid:
        return False, errors

    all_errors = []
    checks = [
        check_free_vars(ast, bound),
        check_depth(ast, max_depth),
        check_node_count(ast, max_nodes),
    ]

    for is_valid, errors in checks:
        if not is_valid:
            all_errors.extend(errors)

    return len(all_errors) == 0, all_errors
