#!/usr/bin/env python3
"""Command-line interface for Fixpoint."""

import argparse
import json
import sys

from .builtins import arithmetic_builtins, standard_builtins
from .config import get_config, setup_logging
from .core import EvaluationError, pretty_print_ast
from .driver import FixpointCompiler
from .programs import PROGRAMS
from .verify import verify_ast

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile a sample Fixpoint program to its fixed point")
    parser.add_argument("program", nargs="?", choices=sorted(PROGRAMS), help="Sample program name")
    parser.add_argument("--list", action="store_true", help="List sample programs and exit")
    parser.add_argument(
        "--max-iterations", type=int, default=get_config().driver.max_iterations,
        help="Maximum number of passes"
    )
    parser.add_argument("--verify", action="store_true", help="Verify the program before compiling")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS,
        default=get_config().log_level.upper(), help="Logging level"
    )
    return parser


def run_main(argv=None) -> int:
    """Main entry point for fixpoint-run command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        for name in sorted(PROGRAMS):
            print(f"{name}: {pretty_print_ast(PROGRAMS[name]())}")
        return 0

    if args.program is None:
        parser.error("a program name is required unless --list is given")
    if args.max_iterations < 1:
        parser.error("--max-iterations must be at least 1")

    setup_logging(args.log_level)
    program = PROGRAMS[args.program]()
    extras = arithmetic_builtins()

    if args.verify:
        verifier = get_config().verifier
        names = list(standard_builtins()) + list(extras)
        is_valid, errors = verify_ast(program, names, verifier.max_depth, verifier.max_nodes)
        if not is_valid:
            for error in errors:
                print(f"Verification error: {error}", file=sys.stderr)
            return 1

    compiler = FixpointCompiler(args.max_iterations, extras)
    try:
        log = compiler.compile(program)
    except EvaluationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps({
            "program": args.program,
            "converged": compiler.converged,
            "passes": len(compiler.passes),
            "parameter": compiler.passes[-1].next_parameter,
            "log": log,
        }, indent=2))
    else:
        for line in log:
            print(line)
        status = "converged" if compiler.converged else "not converged"
        print(f"-- {status} after {len(compiler.passes)} passes", file=sys.stderr)

    return 0


def main():
    sys.exit(run_main())


if __name__ == "__main__":
    main()
