"""Facade for the function grapher expression engine."""

from __future__ import annotations

from typing import Sequence

from .compiler import CHECK_X, compile_expression, compile_tokens
from .errors import DomainError, ExpressionError, ExpressionSyntaxError, LexError, StackError
from .evaluator import evaluate
from .program import FUNCTION_NAMES, Function, Instruction, OpCode, Operator, Program
from .sampler import (
    DEFAULT_RANGE,
    SamplePoint,
    ViewWindow,
    ZOOM_IN_FACTOR,
    ZOOM_OUT_FACTOR,
    sample,
    split_segments,
)
from .settings import GrapherSettings, load_settings
from .tokens import CONSTANTS, VARIABLE_NAME, LexMode, Token, TokenKind, tokenize

QUICK_EXAMPLES: tuple[str, ...] = (
    "sin(x)",
    "x^2 - 4",
    "tan(x)",
    "sin(x) / x",
    "log(x)",
    "x * sin(x^2)",
)


def vocabulary() -> dict[str, object]:
    """Return the closed vocabulary of the expression language."""

    return {
        "variable": VARIABLE_NAME,
        "functions": list(FUNCTION_NAMES),
        "constants": sorted(CONSTANTS),
        "operators": ["+", "-", "*", "/", "^"],
        "examples": list(QUICK_EXAMPLES),
    }


def compile_summary(
    expression: str,
    *,
    lex_mode: LexMode = "strict",
    max_length: int = 256,
) -> dict[str, object]:
    """Compile ``expression`` and describe its tokens and postfix program."""

    tokens = tokenize(expression, lex_mode=lex_mode, max_length=max_length)
    program = compile_expression(expression, lex_mode=lex_mode, max_length=max_length)
    return {
        "expression": program.source,
        "tokens": [token.to_dict() for token in tokens],
        "normalized": " ".join(str(token) for token in tokens),
        "rpn": str(program),
        "instructions": len(program),
        "uses_variable": program.uses_variable,
    }


def evaluate_expression(
    expression: str,
    x: float,
    *,
    lex_mode: LexMode = "strict",
    max_length: int = 256,
) -> dict[str, object]:
    """Compile ``expression`` and evaluate it at ``x``.

    A domain failure is reported as ``result = None`` with a message instead
    of being raised.
    """

    program = compile_expression(expression, lex_mode=lex_mode, max_length=max_length)
    result: float | None
    try:
        result = evaluate(program, x)
        domain_error = None
    except DomainError as exc:
        result = None
        domain_error = str(exc)
    return {
        "expression": program.source,
        "rpn": str(program),
        "x": float(x),
        "result": result,
        "domain_error": domain_error,
    }


def sample_expression(
    expression: str,
    *,
    width: int,
    height: int,
    x_range: Sequence[float] = DEFAULT_RANGE,
    y_range: Sequence[float] = DEFAULT_RANGE,
    lex_mode: LexMode = "strict",
    max_length: int = 256,
    workers: int = 1,
) -> dict[str, object]:
    """Compile ``expression`` and sample it across a view window."""

    program = compile_expression(expression, lex_mode=lex_mode, max_length=max_length)
    window = ViewWindow(tuple(x_range), tuple(y_range))  # type: ignore[arg-type]
    points = sample(program, width, height, window.x_range, window.y_range, workers=workers)
    segments = split_segments(points, height)
    return {
        "expression": program.source,
        "rpn": str(program),
        "width": width,
        "height": height,
        "window": window.to_dict(),
        "points": [list(point) if point is not None else None for point in points],
        "segments": [[list(point) for point in segment] for segment in segments],
        "gaps": sum(1 for point in points if point is None),
    }


__all__ = [
    "CHECK_X",
    "CONSTANTS",
    "DEFAULT_RANGE",
    "DomainError",
    "ExpressionError",
    "ExpressionSyntaxError",
    "FUNCTION_NAMES",
    "Function",
    "GrapherSettings",
    "Instruction",
    "LexError",
    "LexMode",
    "OpCode",
    "Operator",
    "Program",
    "QUICK_EXAMPLES",
    "SamplePoint",
    "StackError",
    "Token",
    "TokenKind",
    "VARIABLE_NAME",
    "ViewWindow",
    "ZOOM_IN_FACTOR",
    "ZOOM_OUT_FACTOR",
    "compile_expression",
    "compile_summary",
    "compile_tokens",
    "evaluate",
    "evaluate_expression",
    "load_settings",
    "sample",
    "sample_expression",
    "split_segments",
    "vocabulary",
]
