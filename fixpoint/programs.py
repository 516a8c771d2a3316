"""
Sample Fixpoint programs.

Every program here expects the standard builtins plus the arithmetic
extension set (see builtins.arithmetic_builtins).
"""

from typing import Callable, Dict

from .core import Node, apply, call, const, if_expr, lam, self_ref, seq, var


def factorial_function() -> Node:
    """(self (lambda self (lambda n (if (is_zero n) 1 (mul n (self (sub n 1)))))))"""
    body = if_expr(call(var('is_zero'), var('n')),
                   const(1),
                   call(var('mul'), var('n'),
                        apply(var('self'), call(var('sub'), var('n'), const(1)))))
    return apply(self_ref(), lam('self', lam('n', body)))


def factorial(n: int = 5) -> Node:
    """Emit n! as a single log entry."""
    return apply(var('content'), apply(var('show'), apply(factorial_function(), const(n))))


def page_numbers(pages: int = 2) -> Node:
    """
    Document whose header reports the document's own final length.

    A note is added once the document grows past three entries, which
    changes the length again, so the header needs several passes to settle.
    """
    ignored = const(0)
    header = apply(var('content'),
                   call(var('concat'), const("Total entries: "),
                        apply(var('show'), apply(var('size'), ignored))))
    note = if_expr(call(var('lt'), const(3), apply(var('size'), ignored)),
                   apply(var('content'), const("(long document)")),
                   const(""))
    body = [apply(var('content'), const(f"page {i}")) for i in range(1, pages + 1)]
    finish = apply(var('resize'), apply(var('location'), ignored))
    return seq(apply(var('content'), const("Title")), header, note, *body, finish)


def progress() -> Node:
    """Report how far through the final document the report line sits."""
    ignored = const(0)
    report = if_expr(
        apply(var('is_zero'), apply(var('size'), ignored)),
        apply(var('content'), const("progress: ?")),
        apply(var('content'),
              call(var('concat'), const("progress: "),
                   apply(var('show'), apply(var('percent'), ignored)))))
    return seq(apply(var('content'), const("a")),
               apply(var('content'), const("b")),
               report,
               apply(var('resize'), apply(var('location'), ignored)))


PROGRAMS: Dict[str, Callable[[], Node]] = {
    'factorial': factorial,
    'page_numbers': page_numbers,
    'progress': progress,
}
