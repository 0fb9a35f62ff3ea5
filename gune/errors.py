from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from gune.reader.lexer import Token, TokenKind


class GuneError(Exception):
    """ Base class for all gune errors"""

    @property
    def kind(self) -> str:
        return type(self).__name__


class LexError(GuneError):
    """ Raised when the tokenizer meets a character it does not recognise"""

    def __init__(self, char: str, position: int):
        super().__init__(f"Unknown char {char!r} at {position}")
        self.char = char
        self.position = position


class ParseError(GuneError):
    """ Raised when a token does not fit the grammar"""

    def __init__(self, token: Token, expected: Optional[TokenKind] = None):
        found = token.text or token.kind.value
        if expected is not None:
            message = f"Expected {expected.value} but found {found!r} at {token.position}"
        else:
            message = f"Unexpected token {found!r} at {token.position}"
        super().__init__(message)
        self.token = token
        self.expected = expected


class NestingTooDeep(ParseError):
    """ Raised when parentheses nest deeper than the parser allows"""

    def __init__(self, token: Token, limit: int):
        GuneError.__init__(self, f"Parentheses nest deeper than {limit} levels at {token.position}")
        self.token = token
        self.expected = None
        self.limit = limit


class DuplicateBinding(GuneError):
    """ Raised when a name is declared twice in the same frame"""

    def __init__(self, name: str):
        super().__init__(f"{name} already defined")
        self.name = name


class UndefinedVariable(GuneError):
    """ Raised when a name is not bound anywhere in the scope chain"""

    def __init__(self, name: str):
        super().__init__(f"{name} undefined")
        self.name = name


class TypeMismatch(GuneError):
    """ Raised when a Float operand is paired with a Nil operand"""

    def __init__(self, operator: str, left: Any, right: Any):
        super().__init__(f"Cannot apply {operator!r} to {left!r} and {right!r}")
        self.operator = operator
        self.left = left
        self.right = right


class DivisionByZero(GuneError):
    """ Raised when the right operand of '/' is zero"""

    def __init__(self, left: Any):
        super().__init__("division by zero")
        self.left = left


class UnsupportedOperator(GuneError):
    """ Raised when an operator has no evaluation rule"""

    def __init__(self, operator: str):
        super().__init__(f"unsupported operator {operator!r}")
        self.operator = operator


class RecursionLimitExceeded(GuneError):
    """ Raised when an input is too deeply nested to process"""

    def __init__(self):
        super().__init__("input nests too deeply to evaluate")
