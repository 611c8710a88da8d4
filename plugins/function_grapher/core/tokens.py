"""Lexical analysis for single-variable expressions.

The tokenizer lowercases its input and scans it left to right. At every
position it tries, in order, a numeric literal, a run of letters and a single
operator or parenthesis character. Letter runs resolve to the variable ``x``,
to the constants ``pi`` and ``e`` (expanded into number tokens on the spot) or
to a function token whose name is checked later by the compiler.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import Literal

from common.logging import get_logger

from .errors import LexError

LexMode = Literal["strict", "lenient"]

VARIABLE_NAME = "x"
CONSTANTS: dict[str, float] = {"pi": math.pi, "e": math.e}

_ALLOWED_LEX_MODES = {"strict", "lenient"}
_DEFAULT_MAX_LENGTH = 256

_TOKEN_RE = re.compile(
    r"(?P<number>[0-9]+\.?[0-9]*|\.[0-9]+)"
    r"|(?P<word>[a-z]+)"
    r"|(?P<symbol>[-+*/^()])"
)
_WHITESPACE_RE = re.compile(r"\s+")

logger = get_logger("function_grapher.tokens")


class TokenKind(enum.Enum):
    NUMBER = "number"
    VARIABLE = "variable"
    FUNCTION = "function"
    OPERATOR = "operator"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token and the offset it was read from."""

    kind: TokenKind
    value: float | str | None = None
    position: int = 0

    @property
    def starts_operand(self) -> bool:
        """True for tokens that open a new operand-like unit."""

        return self.kind in (
            TokenKind.NUMBER,
            TokenKind.VARIABLE,
            TokenKind.FUNCTION,
            TokenKind.LEFT_PAREN,
        )

    @property
    def ends_operand(self) -> bool:
        return self.kind in (TokenKind.NUMBER, TokenKind.VARIABLE, TokenKind.RIGHT_PAREN)

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "value": self.value, "position": self.position}

    def __str__(self) -> str:
        if self.kind is TokenKind.NUMBER:
            return f"{self.value:.12g}"
        if self.kind is TokenKind.LEFT_PAREN:
            return "("
        if self.kind is TokenKind.RIGHT_PAREN:
            return ")"
        return str(self.value)


def validate_lex_mode(lex_mode: str) -> LexMode:
    if lex_mode not in _ALLOWED_LEX_MODES:
        raise LexError("lex_mode must be 'strict' or 'lenient'")
    return lex_mode  # type: ignore[return-value]


def _word_token(word: str, position: int) -> Token:
    if word == VARIABLE_NAME:
        return Token(TokenKind.VARIABLE, VARIABLE_NAME, position)
    if word in CONSTANTS:
        return Token(TokenKind.NUMBER, CONSTANTS[word], position)
    return Token(TokenKind.FUNCTION, word, position)


def _symbol_token(symbol: str, position: int) -> Token:
    if symbol == "(":
        return Token(TokenKind.LEFT_PAREN, "(", position)
    if symbol == ")":
        return Token(TokenKind.RIGHT_PAREN, ")", position)
    return Token(TokenKind.OPERATOR, symbol, position)


def tokenize(
    text: str,
    *,
    lex_mode: LexMode = "strict",
    max_length: int = _DEFAULT_MAX_LENGTH,
) -> list[Token]:
    """Split ``text`` into tokens.

    In ``strict`` mode any character that cannot start a token raises
    :class:`LexError`; in ``lenient`` mode such characters are dropped.
    """

    if not isinstance(text, str):
        raise LexError("Expression must be a string")
    lex_mode = validate_lex_mode(lex_mode)
    if len(text) > max_length:
        raise LexError(f"Expression is too long (limit {max_length} characters)")

    source = text.lower()
    tokens: list[Token] = []
    pos = 0
    while pos < len(source):
        blank = _WHITESPACE_RE.match(source, pos)
        if blank:
            pos = blank.end()
            continue
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            char = source[pos]
            if lex_mode == "strict":
                raise LexError(
                    f"Unexpected character '{char}' at position {pos}",
                    position=pos,
                    char=char,
                )
            logger.debug("skipping unexpected character %r at %d", char, pos)
            pos += 1
            continue
        kind = match.lastgroup
        lexeme = match.group()
        if kind == "number":
            tokens.append(Token(TokenKind.NUMBER, float(lexeme), pos))
        elif kind == "word":
            tokens.append(_word_token(lexeme, pos))
        else:
            tokens.append(_symbol_token(lexeme, pos))
        pos = match.end()
    return tokens


__all__ = [
    "CONSTANTS",
    "LexMode",
    "Token",
    "TokenKind",
    "VARIABLE_NAME",
    "tokenize",
    "validate_lex_mode",
]
