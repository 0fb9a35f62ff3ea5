from __future__ import annotations

from typing import Iterable

from gune import Node
from gune.reader.lexer import Token
from gune.types.ast import BinaryExpression, Identifier, NilLiteral, NumericLiteral, Program
from gune.types.values import Float, render

# ----------------- ANSI colors -----------------
RESET = "\033[0m"
COLOR_NODE = "\033[90m"
COLOR_OPERATOR = "\033[93m"
COLOR_NUMBER = "\033[96m"
COLOR_IDENTIFIER = "\033[94m"
COLOR_NIL = "\033[95m"

INDENT = "  "


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{RESET}" if enabled else text


def _number(value: float) -> str:
    return render(Float(value))


# ----------------- Tree printer -----------------
def _format_leaf(node: Node, color: bool) -> str:
    match node:
        case NumericLiteral(value=value):
            return f"{_paint('NumericLiteral', COLOR_NODE, color)} {_paint(_number(value), COLOR_NUMBER, color)}"
        case Identifier(symbol=symbol):
            return f"{_paint('Identifier', COLOR_NODE, color)} {_paint(symbol, COLOR_IDENTIFIER, color)}"
        case NilLiteral():
            return _paint("NilLiteral", COLOR_NIL, color)
    raise TypeError(f"Not a syntax tree node: {node!r}")


def format_ast(node: Node, color: bool = False, depth: int = 0) -> str:
    """Indented one-node-per-line view of a syntax tree."""
    lines: list[str] = []
    # Pre-order walk; children are pushed in reverse so they pop in order
    stack: list[tuple[Node, int]] = [(node, depth)]
    while stack:
        current, level = stack.pop()
        pad = INDENT * level
        match current:
            case Program(body=body):
                lines.append(pad + _paint("Program", COLOR_NODE, color))
                stack.extend((expr, level + 1) for expr in reversed(body))
            case BinaryExpression(operator=op, left=left, right=right):
                lines.append(
                    f"{pad}{_paint('BinaryExpression', COLOR_NODE, color)} {_paint(op, COLOR_OPERATOR, color)}"
                )
                stack.append((right, level + 1))
                stack.append((left, level + 1))
            case _:
                lines.append(pad + _format_leaf(current, color))
    return "\n".join(lines)


def to_sexpr(node: Node) -> str:
    """Compact fully parenthesised form, e.g. (+ 2 (* 3 4))."""
    parts: list[str] = []
    work: list[Node | str] = [node]
    while work:
        item = work.pop()
        match item:
            case str():
                parts.append(item)
            case Program(body=body):
                for i, expr in enumerate(reversed(body)):
                    if i:
                        work.append(" ")
                    work.append(expr)
            case BinaryExpression(operator=op, left=left, right=right):
                work.extend([")", right, " ", left, f"({op} "])
            case NumericLiteral(value=value):
                parts.append(_number(value))
            case Identifier(symbol=symbol):
                parts.append(symbol)
            case NilLiteral():
                parts.append("nil")
            case _:
                raise TypeError(f"Not a syntax tree node: {item!r}")
    return "".join(parts)


def format_tokens(tokens: Iterable[Token]) -> str:
    return " ".join(f"{tok.kind.value}({tok.text!r})@{tok.position}" for tok in tokens)
