"""Postfix program representation and the closed expression vocabulary."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator


class Function(enum.Enum):
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    SQRT = "sqrt"
    LOG = "log"
    LN = "ln"
    ABS = "abs"

    @classmethod
    def lookup(cls, name: str) -> "Function | None":
        try:
            return cls(name)
        except ValueError:
            return None


class Operator(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"
    NEG = "neg"

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    @property
    def right_associative(self) -> bool:
        return self in (Operator.POW, Operator.NEG)

    @property
    def is_unary(self) -> bool:
        return self is Operator.NEG


_PRECEDENCE = {
    Operator.ADD: 1,
    Operator.SUB: 1,
    Operator.MUL: 2,
    Operator.DIV: 2,
    Operator.POW: 3,
    Operator.NEG: 4,
}


class OpCode(enum.Enum):
    PUSH_CONST = "push_const"
    PUSH_VAR = "push_var"
    BINARY = "binary"
    UNARY = "unary"
    CALL = "call"


@dataclass(frozen=True, slots=True)
class Instruction:
    opcode: OpCode
    operand: float | Operator | Function | None = None

    @classmethod
    def push_const(cls, value: float) -> "Instruction":
        return cls(OpCode.PUSH_CONST, float(value))

    @classmethod
    def push_var(cls) -> "Instruction":
        return cls(OpCode.PUSH_VAR)

    @classmethod
    def apply(cls, operator: Operator) -> "Instruction":
        return cls(OpCode.UNARY if operator.is_unary else OpCode.BINARY, operator)

    @classmethod
    def call(cls, function: Function) -> "Instruction":
        return cls(OpCode.CALL, function)

    def __str__(self) -> str:
        if self.opcode is OpCode.PUSH_CONST:
            return f"{self.operand:.12g}"
        if self.opcode is OpCode.PUSH_VAR:
            return "x"
        return self.operand.value  # type: ignore[union-attr]


@dataclass(frozen=True, slots=True)
class Program:
    """An immutable, linear postfix instruction sequence."""

    instructions: tuple[Instruction, ...]
    source: str = ""

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    def __str__(self) -> str:
        return " ".join(str(instruction) for instruction in self.instructions)

    @property
    def uses_variable(self) -> bool:
        return any(instruction.opcode is OpCode.PUSH_VAR for instruction in self.instructions)


FUNCTION_NAMES: tuple[str, ...] = tuple(function.value for function in Function)


__all__ = [
    "FUNCTION_NAMES",
    "Function",
    "Instruction",
    "OpCode",
    "Operator",
    "Program",
]
