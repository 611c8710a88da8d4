"""Exception hierarchy for the expression engine."""

from __future__ import annotations


class ExpressionError(ValueError):
    """Base class for every failure raised by the expression engine."""


class LexError(ExpressionError):
    """Raised when the input text contains a character no token can start with."""

    def __init__(self, message: str, *, position: int | None = None, char: str | None = None):
        super().__init__(message)
        self.position = position
        self.char = char


class ExpressionSyntaxError(ExpressionError):
    """Raised when a token sequence does not form a valid expression."""

    def __init__(self, message: str, *, position: int | None = None):
        super().__init__(message)
        self.position = position


class DomainError(ExpressionError):
    """Raised when a result is mathematically undefined for the given input."""


class StackError(ExpressionError):
    """Raised when a postfix program leaves the value stack in an invalid state."""


__all__ = [
    "ExpressionError",
    "LexError",
    "ExpressionSyntaxError",
    "DomainError",
    "StackError",
]
