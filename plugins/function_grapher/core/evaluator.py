"""Single-pass postfix evaluation against a bound value of ``x``."""

from __future__ import annotations

import math
from typing import Callable

from .errors import DomainError, StackError
from .program import Function, Instruction, OpCode, Operator, Program

_FUNCTIONS: dict[Function, Callable[[float], float]] = {
    Function.SIN: math.sin,
    Function.COS: math.cos,
    Function.TAN: math.tan,
    Function.SQRT: math.sqrt,
    Function.LOG: math.log10,
    Function.LN: math.log,
    Function.ABS: math.fabs,
}

_BINARY: dict[Operator, Callable[[float, float], float]] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUB: lambda a, b: a - b,
    Operator.MUL: lambda a, b: a * b,
    Operator.DIV: lambda a, b: a / b,
    Operator.POW: math.pow,
}


def _pop(stack: list[float], instruction: Instruction) -> float:
    if not stack:
        raise StackError(f"Value stack is empty when applying '{instruction}'")
    return stack.pop()


def _checked(value: float, instruction: Instruction) -> float:
    if math.isnan(value) or math.isinf(value):
        raise DomainError(f"'{instruction}' produced a non-finite value")
    return value


def _step(instruction: Instruction, stack: list[float], x: float) -> float:
    opcode = instruction.opcode
    if opcode is OpCode.PUSH_CONST:
        return float(instruction.operand)  # type: ignore[arg-type]
    if opcode is OpCode.PUSH_VAR:
        return x
    if opcode is OpCode.UNARY:
        return -_pop(stack, instruction)
    if opcode is OpCode.BINARY:
        right = _pop(stack, instruction)
        left = _pop(stack, instruction)
        try:
            return _BINARY[instruction.operand](left, right)  # type: ignore[index]
        except ZeroDivisionError as exc:
            raise DomainError("Division by zero") from exc
        except (ValueError, OverflowError) as exc:
            raise DomainError(f"{left:g} ^ {right:g} is not a finite real number") from exc
    if opcode is OpCode.CALL:
        argument = _pop(stack, instruction)
        try:
            return _FUNCTIONS[instruction.operand](argument)  # type: ignore[index]
        except (ValueError, OverflowError) as exc:
            raise DomainError(f"{instruction}({argument:g}) is undefined") from exc
    raise StackError(f"Unknown instruction '{instruction}'")  # pragma: no cover - closed enum


def evaluate(program: Program, x: float) -> float:
    """Run ``program`` with the variable bound to ``x``.

    Returns a finite float. Mathematically undefined results raise
    :class:`DomainError`; a program that under-runs or leaves extra values on
    the stack raises :class:`StackError`.
    """

    x = float(x)
    stack: list[float] = []
    for instruction in program:
        stack.append(_checked(_step(instruction, stack, x), instruction))
    if len(stack) != 1:
        raise StackError(f"Program left {len(stack)} values on the stack, expected 1")
    return stack[0]


__all__ = ["evaluate"]
