"""
  gune Lexer

- Single pass, one character of lookahead
- Numbers are runs of decimal digits (no fractional syntax)
- Identifiers are a letter followed by letters or digits; `let` and `nil`
  are reserved
- Every stream ends with exactly one EOF token, whose position is len(source)
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, NamedTuple

from gune.errors import LexError


class TokenKind(Enum):
    NUMBER = "Number"
    IDENTIFIER = "Identifier"
    LET = "Let"
    NIL = "Nil"
    BINARY_OPERATOR = "BinaryOperator"
    EQUALS = "Equals"
    OPEN_PAREN = "OpenParen"
    CLOSE_PAREN = "CloseParen"
    EOF = "EOF"


class Token(NamedTuple):
    kind: TokenKind
    text: str
    position: int = 0


KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "nil": TokenKind.NIL,
}

ADDITIVE_OPERATORS = ("+", "-")
MULTIPLICATIVE_OPERATORS = ("*", "/", "&")
BINARY_OPERATORS = ADDITIVE_OPERATORS + MULTIPLICATIVE_OPERATORS

SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "=": TokenKind.EQUALS,
    **{op: TokenKind.BINARY_OPERATOR for op in BINARY_OPERATORS},
}

SKIPPABLE = " \t\n\r"


def is_digit(ch: str) -> bool:
    # isdecimal rather than isdigit: float() rejects superscripts like '²'
    return ch.isdecimal()


def is_letter(ch: str) -> bool:
    return ch.isalpha()


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Token(kind, text, position) tuples."""
    pos = 0
    n = len(source)

    while pos < n:
        current_char = source[pos]

        if current_char in SINGLE_CHAR_TOKENS:
            yield Token(SINGLE_CHAR_TOKENS[current_char], current_char, pos)
            pos += 1
            continue

        if is_digit(current_char):
            start = pos
            while pos < n and is_digit(source[pos]):
                pos += 1
            yield Token(TokenKind.NUMBER, source[start:pos], start)
            continue

        if is_letter(current_char):
            start = pos
            while pos < n and (is_letter(source[pos]) or is_digit(source[pos])):
                pos += 1
            word = source[start:pos]
            yield Token(KEYWORDS.get(word, TokenKind.IDENTIFIER), word, start)
            continue

        if current_char in SKIPPABLE:
            pos += 1
            continue

        raise LexError(current_char, pos)

    yield Token(TokenKind.EOF, "", n)


def tokenize(source: str) -> list[Token]:
    """Eagerly lex the whole source. Raises LexError on the first bad character."""
    return list(lex(source))
