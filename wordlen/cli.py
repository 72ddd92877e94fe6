#!/usr/bin/env python3
"""
wordlen CLI - Length-based word equation solver.

A command-line interface for wordlen's capabilities:
- solve: Decide a conjunction of word equations
- check: Decide a batch of problems (one per line)
- parse: Parse and display a problem
- lengths: Print the length formula produced for a problem

Usage:
    wordlen solve 'x = y ++ "ab" & y matches /c*/'
    wordlen check problems.txt
    wordlen parse 'x = y ++ z & x != "a"'
    wordlen lengths 'x = "ab" ++ y'
"""

import argparse
import sys
import json
import time
from pathlib import Path
from typing import List, Optional

# Import version from main package (single source of truth)
from wordlen import __version__
from wordlen.preprocessing.formula_preprocess import DEFAULT_UNDERAPPROX_WINDOW


def _add_solver_options(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--no-preprocess",
        action="store_true",
        help="Skip formula preprocessing"
    )
    parser.add_argument(
        "--no-underapprox",
        action="store_true",
        help="Never under-approximate co-finite languages"
    )
    parser.add_argument(
        "--window",
        type=int,
        default=DEFAULT_UNDERAPPROX_WINDOW,
        help=f"Length window used for under-approximation (default: {DEFAULT_UNDERAPPROX_WINDOW})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed solving steps"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser"""
    parser = argparse.ArgumentParser(
        prog="wordlen",
        description="wordlen - Length-based word equation solver",
        epilog="Use 'wordlen <command> --help' for more information on a specific command.",
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # === SOLVE command ===
    solve_parser = subparsers.add_parser(
        "solve",
        help="Decide a conjunction of word equations",
        description="Decide satisfiability of word (in)equations with regular constraints."
    )
    solve_parser.add_argument(
        "formula",
        nargs="?",
        help="Problem to solve (e.g., 'x = y ++ \"ab\"')"
    )
    solve_parser.add_argument(
        "-f", "--file",
        help="Read problem from file"
    )
    solve_parser.add_argument(
        "--timeout",
        type=int,
        default=5000,
        help="Solver timeout in ms (default: 5000)"
    )
    solve_parser.add_argument(
        "--format",
        default="text",
        choices=["text", "json"],
        help="Output format (default: text)"
    )
    solve_parser.add_argument(
        "--show-formula",
        action="store_true",
        help="Show the length formula"
    )
    _add_solver_options(solve_parser)

    # === CHECK command ===
    check_parser = subparsers.add_parser(
        "check",
        help="Decide a batch of problems from a file",
        description="Decide multiple problems from a file (one per line)."
    )
    check_parser.add_argument(
        "file",
        help="File containing problems (one per line)"
    )
    check_parser.add_argument(
        "--timeout",
        type=int,
        default=5000,
        help="Solver timeout in ms per problem (default: 5000)"
    )
    check_parser.add_argument(
        "--format",
        default="text",
        choices=["text", "json"],
        help="Output format (default: text)"
    )
    _add_solver_options(check_parser)

    # === PARSE command ===
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse and display a problem",
        description="Parse a problem and display its predicates and language constraints."
    )
    parse_parser.add_argument(
        "formula",
        nargs="?",
        help="Problem to parse"
    )
    parse_parser.add_argument(
        "-f", "--file",
        help="Read problem from file"
    )
    parse_parser.add_argument(
        "--format",
        default="text",
        choices=["text", "json"],
        help="Output format (default: text)"
    )

    # === LENGTHS command ===
    lengths_parser = subparsers.add_parser(
        "lengths",
        help="Print the length formula of a problem",
        description="Run the length decision procedure and print its outcome."
    )
    lengths_parser.add_argument(
        "formula",
        nargs="?",
        help="Problem to translate"
    )
    lengths_parser.add_argument(
        "-f", "--file",
        help="Read problem from file"
    )
    _add_solver_options(lengths_parser)

    return parser


def _read_problem(args) -> Optional[str]:
    """Problem text from the positional argument or -f; None after an error"""
    if args.formula:
        return args.formula
    if args.file:
        try:
            return Path(args.file).read_text().strip()
        except OSError as e:
            print(f"Error reading file: {e}", file=sys.stderr)
            return None
    print("Error: Provide a problem string or use -f to read from file", file=sys.stderr)
    return None


def _make_checker(args):
    from wordlen import StringChecker
    return StringChecker(timeout=args.timeout, verbose=args.verbose,
                         preprocess=not args.no_preprocess,
                         underapprox=not args.no_underapprox,
                         underapprox_window=args.window)


# ============================================================================
# SOLVE Command
# ============================================================================

def cmd_solve(args) -> int:
    """Execute solve command - decide a single problem"""
    from wordlen import ParseError

    problem = _read_problem(args)
    if problem is None:
        return 1

    checker = _make_checker(args)

    if args.verbose:
        print(f"Solving: {problem}")
        print("-" * 60)

    start_time = time.time()
    try:
        result = checker.check_text(problem)
    except ParseError as e:
        if args.format == "json":
            print(json.dumps({
                "formula": problem,
                "error": str(e),
                "status": None
            }, indent=2))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1

    elapsed_ms = (time.time() - start_time) * 1000

    if args.format == "json":
        output = {
            "formula": problem,
            "status": result.status,
            "precision": result.precision.value if result.precision else None,
            "reason": result.reason,
            "lengths": result.lengths(),
            "time_ms": round(elapsed_ms, 2)
        }
        if args.show_formula and result.length_formula is not None:
            output["length_formula"] = str(result.length_formula)
        print(json.dumps(output, indent=2))
    else:
        print(str(result))
        if args.show_formula and result.length_formula is not None:
            print(f"Length formula: {result.length_formula}")
        if args.verbose:
            print(f"  Time: {elapsed_ms:.2f}ms")

    return 0


# ============================================================================
# CHECK Command
# ============================================================================

def cmd_check(args) -> int:
    """Execute check command - decide a batch of problems"""
    from wordlen import ParseError

    try:
        lines = Path(args.file).read_text().strip().split('\n')
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    # Filter out comments and empty lines
    problems = []
    for line in lines:
        line = line.strip()
        if line and not line.startswith('#'):
            problems.append(line)

    if not problems:
        print("No problems found in file", file=sys.stderr)
        return 1

    checker = _make_checker(args)

    results = []
    counts = {"sat": 0, "unsat": 0, "unknown": 0, "error": 0}
    total_time = 0.0

    for i, problem in enumerate(problems, 1):
        if args.verbose:
            print(f"[{i}/{len(problems)}] Solving: {problem}")

        start_time = time.time()
        try:
            result = checker.check_text(problem)
            status = result.status
            entry = {"formula": problem, "status": status, "reason": result.reason}
        except ParseError as e:
            status = "error"
            entry = {"formula": problem, "status": None, "error": str(e)}
        elapsed_ms = (time.time() - start_time) * 1000
        total_time += elapsed_ms
        entry["time_ms"] = round(elapsed_ms, 2)

        counts[status] += 1
        results.append(entry)

        if args.verbose:
            print(f"  {status.upper()} ({elapsed_ms:.2f}ms)")

    if args.format == "json":
        print(json.dumps({
            "file": args.file,
            "total": len(problems),
            **counts,
            "total_time_ms": round(total_time, 2),
            "results": results
        }, indent=2))
    else:
        lines = []
        lines.append(f"\n{'='*60}")
        lines.append(f"wordlen check: {args.file}")
        lines.append(f"{'='*60}")
        lines.append(f"\nTotal: {len(problems)}")
        lines.append(f"Sat: {counts['sat']}")
        lines.append(f"Unsat: {counts['unsat']}")
        lines.append(f"Unknown: {counts['unknown']}")
        lines.append(f"Errors: {counts['error']}")
        lines.append(f"Time: {total_time:.2f}ms")

        if counts["error"] > 0:
            lines.append(f"\nErrors:")
            for r in results:
                if r.get("error"):
                    lines.append(f"  {r['formula']}: {r['error']}")

        lines.append(f"\n{'='*60}\n")
        print("\n".join(lines))

    return 0 if counts["error"] == 0 else 1


# ============================================================================
# PARSE Command
# ============================================================================

def problem_to_dict(formula, store) -> dict:
    """Convert a parsed problem to a JSON-serializable dictionary"""
    def side_to_list(side):
        return [{"type": t.type.name.lower(), "name": t.name} for t in side]

    return {
        "predicates": [
            {
                "type": pred.type.name.lower(),
                "left": side_to_list(pred.left),
                "right": side_to_list(pred.right),
            }
            for pred in formula
        ],
        "languages": {
            var: {"states": aut.num_states(), "finals": sorted(aut.finals)}
            for var, aut in sorted(store.items())
        },
    }


def cmd_parse(args) -> int:
    """Execute parse command - parse and display a problem"""
    from wordlen import parse, ParseError

    problem = _read_problem(args)
    if problem is None:
        return 1

    try:
        formula, store = parse(problem)
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(problem_to_dict(formula, store), indent=2))
    else:
        for pred in formula:
            print(pred)
        for var, aut in sorted(store.items()):
            print(f"{var} in {aut}")

    return 0


# ============================================================================
# LENGTHS Command
# ============================================================================

def cmd_lengths(args) -> int:
    """Execute lengths command - print the outcome of the length procedure"""
    from wordlen import parse, ParseError, compute

    problem = _read_problem(args)
    if problem is None:
        return 1

    try:
        formula, store = parse(problem)
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1

    result = compute(formula, store, verbose=args.verbose,
                     preprocess=not args.no_preprocess,
                     underapprox=not args.no_underapprox,
                     underapprox_window=args.window)
    print(str(result))
    return 0


def main(argv: List[str] = None) -> int:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handler
    commands = {
        "solve": cmd_solve,
        "check": cmd_check,
        "parse": cmd_parse,
        "lengths": cmd_lengths,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
