"""
  gune Parser

Recursive descent with one token of lookahead and no backtracking.
Grammar, lowest precedence first:

    program        := statement* EOF
    statement      := expression
    expression     := additive
    additive       := multiplicative (('+' | '-') multiplicative)*
    multiplicative := primary (('*' | '/' | '&') primary)*
    primary        := Identifier | 'nil' | Number | '(' expression ')'

Repeated operators at one level fold to the left: a - b - c == (a - b) - c.
`let` and `=` are tokens without a production and are rejected in primary
position.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from gune import Expression
from gune.errors import NestingTooDeep, ParseError
from gune.reader.lexer import (
    ADDITIVE_OPERATORS,
    MULTIPLICATIVE_OPERATORS,
    Token,
    TokenKind,
    tokenize,
)
from gune.types.ast import BinaryExpression, Identifier, NilLiteral, NumericLiteral, Program


# Each parenthesis level costs four parser frames; stay well inside the
# interpreter recursion limit
MAX_NESTING_DEPTH = 128


class TokenStream:
    def __init__(self, token_iter: Iterable[Token], max_depth: int = MAX_NESTING_DEPTH):
        self.tokens: Iterator[Token] = iter(token_iter)
        self.buffer: list[Token] = []
        self.last: Optional[Token] = None
        self.max_depth = max_depth
        self.depth = 0

    def peek(self) -> Token:
        if not self.buffer:
            token = next(self.tokens, None)
            if token is None:
                # A stream cut short behaves as if it ended properly
                position = self.last.position + len(self.last.text) if self.last else 0
                token = Token(TokenKind.EOF, "", position)
            self.buffer.append(token)
        return self.buffer[0]

    def advance(self) -> Token:
        token = self.peek()
        self.buffer.pop(0)
        self.last = token
        return token

    def expect(self, kind: TokenKind) -> Token:
        if self.peek().kind is not kind:
            raise ParseError(self.peek(), expected=kind)
        return self.advance()

    def at_operator(self, operators: tuple[str, ...]) -> bool:
        token = self.peek()
        return token.kind is TokenKind.BINARY_OPERATOR and token.text in operators

    def parse_program(self) -> Program:
        body: list[Expression] = []
        while self.peek().kind is not TokenKind.EOF:
            body.append(self.parse_statement())
        return Program(tuple(body))

    def parse_statement(self) -> Expression:
        return self.parse_expression()

    def parse_expression(self) -> Expression:
        return self.parse_additive()

    def parse_additive(self) -> Expression:
        left = self.parse_multiplicative()
        while self.at_operator(ADDITIVE_OPERATORS):
            operator = self.advance().text
            right = self.parse_multiplicative()
            left = BinaryExpression(operator, left, right)
        return left

    def parse_multiplicative(self) -> Expression:
        left = self.parse_primary()
        while self.at_operator(MULTIPLICATIVE_OPERATORS):
            operator = self.advance().text
            right = self.parse_primary()
            left = BinaryExpression(operator, left, right)
        return left

    def parse_primary(self) -> Expression:
        token = self.peek()
        match token.kind:
            case TokenKind.IDENTIFIER:
                self.advance()
                return Identifier(token.text)
            case TokenKind.NIL:
                self.advance()
                return NilLiteral()
            case TokenKind.NUMBER:
                self.advance()
                return NumericLiteral(float(token.text))
            case TokenKind.OPEN_PAREN:
                if self.depth >= self.max_depth:
                    raise NestingTooDeep(token, self.max_depth)
                self.advance()
                self.depth += 1
                expr = self.parse_expression()
                self.expect(TokenKind.CLOSE_PAREN)
                self.depth -= 1
                return expr
        raise ParseError(token)


def parse_tokens(tokens: Iterable[Token]) -> Program:
    return TokenStream(tokens).parse_program()


def parse(source: str) -> Program:
    """Lex and parse `source` into a Program. Raises LexError or ParseError."""
    return TokenStream(tokenize(source)).parse_program()
