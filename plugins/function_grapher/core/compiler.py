"""Operator-precedence compiler turning tokens into a postfix program."""

from __future__ import annotations

from typing import Sequence, Union

from common.logging import get_logger

from .errors import DomainError, ExpressionSyntaxError, StackError
from .evaluator import evaluate
from .program import Function, Instruction, Operator, Program
from .tokens import LexMode, Token, TokenKind, tokenize

# Operator stack entries: pending operators, pending functions and open parens.
_StackEntry = Union[Operator, Function, Token]

CHECK_X = 1.0

logger = get_logger("function_grapher.compiler")


def _emit(entry: Operator | Function) -> Instruction:
    if isinstance(entry, Function):
        return Instruction.call(entry)
    return Instruction.apply(entry)


def _should_pop(top: _StackEntry, incoming: Operator) -> bool:
    if not isinstance(top, Operator):
        return False
    # A pending sign stays below an exponent: -2^2 is -(2^2).
    if top is Operator.NEG and incoming is Operator.POW:
        return False
    if top.precedence > incoming.precedence:
        return True
    return top.precedence == incoming.precedence and not incoming.right_associative


def _push_operator(incoming: Operator, stack: list[_StackEntry], output: list[Instruction]) -> None:
    while stack and _should_pop(stack[-1], incoming):
        output.append(_emit(stack.pop()))  # type: ignore[arg-type]
    stack.append(incoming)


def _close_group(token: Token, stack: list[_StackEntry], output: list[Instruction]) -> None:
    while stack and not isinstance(stack[-1], Token):
        output.append(_emit(stack.pop()))  # type: ignore[arg-type]
    if not stack:
        raise ExpressionSyntaxError(
            f"Unmatched ')' at position {token.position}", position=token.position
        )
    stack.pop()
    if stack and isinstance(stack[-1], Function):
        output.append(_emit(stack.pop()))  # type: ignore[arg-type]


def _function_for(token: Token) -> Function:
    function = Function.lookup(str(token.value))
    if function is None:
        raise ExpressionSyntaxError(
            f"Unknown function '{token.value}' at position {token.position}",
            position=token.position,
        )
    return function


def compile_tokens(tokens: Sequence[Token], *, source: str = "") -> Program:
    """Convert ``tokens`` into a :class:`Program` using the shunting-yard method.

    Adjacent operands get an implicit ``*`` and a ``-`` in operand position
    becomes a unary negation. The token stream is validated while it is
    consumed so that a returned program never under-runs its value stack.
    """

    if not tokens:
        raise ExpressionSyntaxError("Expression is empty")

    output: list[Instruction] = []
    stack: list[_StackEntry] = []
    expect_operand = True
    prev: Token | None = None

    for token in tokens:
        if prev is not None and prev.kind is TokenKind.FUNCTION and token.kind is not TokenKind.LEFT_PAREN:
            raise ExpressionSyntaxError(
                f"Function '{prev.value}' must be followed by '('", position=prev.position
            )
        if prev is not None and token.starts_operand and prev.ends_operand:
            _push_operator(Operator.MUL, stack, output)
            expect_operand = True

        kind = token.kind
        if kind is TokenKind.NUMBER:
            output.append(Instruction.push_const(float(token.value)))  # type: ignore[arg-type]
            expect_operand = False
        elif kind is TokenKind.VARIABLE:
            output.append(Instruction.push_var())
            expect_operand = False
        elif kind is TokenKind.FUNCTION:
            stack.append(_function_for(token))
        elif kind is TokenKind.LEFT_PAREN:
            stack.append(token)
            expect_operand = True
        elif kind is TokenKind.RIGHT_PAREN:
            if expect_operand:
                raise ExpressionSyntaxError(
                    f"Expected an operand before ')' at position {token.position}",
                    position=token.position,
                )
            _close_group(token, stack, output)
            expect_operand = False
        else:
            if expect_operand:
                if token.value != "-":
                    raise ExpressionSyntaxError(
                        f"Operator '{token.value}' at position {token.position} is missing its left operand",
                        position=token.position,
                    )
                operator = Operator.NEG
            else:
                operator = Operator(token.value)
            _push_operator(operator, stack, output)
            expect_operand = True
        prev = token

    if prev is not None and prev.kind is TokenKind.FUNCTION:
        raise ExpressionSyntaxError(
            f"Function '{prev.value}' must be followed by '('", position=prev.position
        )
    if expect_operand:
        raise ExpressionSyntaxError("Expression is incomplete: an operand is missing at the end")

    while stack:
        entry = stack.pop()
        if isinstance(entry, Token):
            raise ExpressionSyntaxError(
                f"Unmatched '(' at position {entry.position}", position=entry.position
            )
        output.append(_emit(entry))

    return Program(instructions=tuple(output), source=source)


def compile_expression(
    text: str,
    *,
    lex_mode: LexMode = "strict",
    max_length: int = 256,
) -> Program:
    """Tokenize, compile and trial-evaluate ``text``.

    The compiled program is evaluated once at ``x = 1``. A malformed value
    stack there rejects the program; an undefined result does not, since a
    valid expression may simply be outside its domain at the check point.
    """

    tokens = tokenize(text, lex_mode=lex_mode, max_length=max_length)
    try:
        program = compile_tokens(tokens, source=text.strip())
    except ExpressionSyntaxError as exc:
        logger.debug("compile failed for %r: %s", text, exc)
        raise
    try:
        evaluate(program, CHECK_X)
    except DomainError:
        pass
    except StackError as exc:
        logger.debug("trial evaluation rejected %r: %s", text, exc)
        raise ExpressionSyntaxError(f"Expression is malformed: {exc}") from exc
    return program


__all__ = ["CHECK_X", "compile_expression", "compile_tokens"]
