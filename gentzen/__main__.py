"""
CLI entry point. Run as: python -m gentzen SCENARIO [options]

Exit status: 0 if every target is proven, 1 if any is not, 2 if the
scenario, a formula, or the configuration is malformed.
"""

import argparse
import json
import logging
import sys

from .config import ENVIRONMENTS, GentzenConfig, configure_logging
from .core.exceptions import GentzenError
from .core.lexer import is_identifier
from .reasoning import run_gentzen_reasoning
from .visualization import display_results, export_dot


def parse_fact(text: str) -> tuple:
    """NAME=true|false -> (NAME, bool)."""
    name, sep, value = text.partition("=")
    value = value.strip().lower()
    name = name.strip()
    if not sep or value not in ("true", "false", "1", "0", "yes", "no"):
        raise argparse.ArgumentTypeError(f"expected NAME=true|false, got {text!r}")
    if not is_identifier(name):
        raise argparse.ArgumentTypeError(
            f"fact name {name!r} is not an atom (letter, then letters, digits or _)")
    return name, value in ("true", "1", "yes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gentzen",
        description="Prove scenario targets by natural deduction over resolved facts",
    )
    parser.add_argument("scenario", help="YAML scenario file")
    parser.add_argument("--resolvers", default=None,
                        help="Directory of Python resolver modules")
    parser.add_argument("--fact", action="append", type=parse_fact, default=[],
                        metavar="NAME=BOOL", help="Static fact (repeatable)")
    parser.add_argument("--validate", action="store_true", help="Validate the scenario first")
    parser.add_argument("--selective", action="store_true",
                        help="Only run resolvers for atoms the scenario references")
    parser.add_argument("--max-depth", type=int, default=None, help="Search rounds per target")
    parser.add_argument("--env", choices=ENVIRONMENTS, default=None,
                        help="Configuration preset (default: $GENTZEN_ENV)")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--dot", type=str, default=None, help="Export DOT graph to file")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--verbose", action="store_true", help="Show steps and resolutions")
    return parser


def results_to_json(results: dict) -> str:
    payload = {k: v for k, v in results.items() if k not in ("system", "validation")}
    validation = results.get("validation")
    if validation is not None:
        payload["validation"] = {
            "is_valid": validation.is_valid,
            "errors": validation.errors,
            "warnings": validation.warnings,
        }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.env:
            config = GentzenConfig.for_environment(args.env)
        else:
            config = GentzenConfig.from_env()
        if args.max_depth is not None:
            config.reasoning.max_proof_depth = args.max_depth
        if args.quiet:
            config.logging.level = "WARNING"
        config.validate()
    except GentzenError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(config.logging)
    log = logging.getLogger("gentzen")

    try:
        results = run_gentzen_reasoning(
            args.scenario,
            resolvers_path=args.resolvers,
            custom_resolvers=dict(args.fact),
            validate=args.validate,
            selective_resolution=args.selective,
            config=config,
            log=log,
        )
    except GentzenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 1

    if args.json:
        print(results_to_json(results))
    else:
        display_results(results, verbose=args.verbose, display=config.display)

    if args.dot:
        export_dot(results["system"], args.dot)
        if not args.json:
            print(f"Graph exported to {args.dot}")

    summary = results["summary"]
    return 0 if summary["proven_targets"] == summary["total_targets"] else 1


if __name__ == "__main__":
    sys.exit(main())
