"""Command line interface for the Function Grapher plugin."""

from __future__ import annotations

import argparse
import json
from typing import Any

from .core import compile_summary, evaluate_expression, sample_expression


def _print(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _range(value: str) -> tuple[float, float]:
    try:
        low, high = (float(part) for part in value.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected MIN,MAX but got '{value}'") from exc
    return low, high


def command_compile(args: argparse.Namespace) -> None:
    _print(compile_summary(args.expression, lex_mode=args.lex_mode))


def command_evaluate(args: argparse.Namespace) -> None:
    _print(evaluate_expression(args.expression, args.x, lex_mode=args.lex_mode))


def command_sample(args: argparse.Namespace) -> None:
    result = sample_expression(
        args.expression,
        width=args.width,
        height=args.height,
        x_range=args.x_range,
        y_range=args.y_range,
        lex_mode=args.lex_mode,
        workers=args.workers,
    )
    if not args.points:
        result.pop("points")
    _print(result)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Function Grapher CLI")
    parser.add_argument(
        "--lex-mode",
        dest="lex_mode",
        default="strict",
        choices=["strict", "lenient"],
        help="Reject (strict) or skip (lenient) unknown characters",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Show tokens and the postfix program")
    compile_parser.add_argument("expression", help="Expression in x, e.g. '2x^2 - 1'")
    compile_parser.set_defaults(func=command_compile)

    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate an expression at one x")
    evaluate_parser.add_argument("expression")
    evaluate_parser.add_argument("--x", type=float, required=True, help="Value bound to x")
    evaluate_parser.set_defaults(func=command_evaluate)

    sample_parser = subparsers.add_parser("sample", help="Sample an expression into pixel space")
    sample_parser.add_argument("expression")
    sample_parser.add_argument("--width", type=int, default=80, help="Horizontal pixel count")
    sample_parser.add_argument("--height", type=int, default=40, help="Vertical pixel count")
    sample_parser.add_argument("--x-range", dest="x_range", type=_range, default=(-10.0, 10.0), help="MIN,MAX")
    sample_parser.add_argument("--y-range", dest="y_range", type=_range, default=(-10.0, 10.0), help="MIN,MAX")
    sample_parser.add_argument("--workers", type=int, default=1, help="Threads used for evaluation")
    sample_parser.add_argument("--points", action="store_true", help="Include the raw point list")
    sample_parser.set_defaults(func=command_sample)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
