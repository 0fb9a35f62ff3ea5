"""Syntax tree nodes produced by the parser.

Nodes are frozen dataclasses: a parent owns its children outright and nothing
mutates a tree once the parser has returned it. The set of node classes is
closed; the evaluator matches on every one of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class NumericLiteral:
    value: float


@dataclass(frozen=True)
class NilLiteral:
    pass


@dataclass(frozen=True)
class Identifier:
    symbol: str


@dataclass(frozen=True)
class BinaryExpression:
    operator: str
    left: Expression
    right: Expression


Expression = Union[NumericLiteral, NilLiteral, Identifier, BinaryExpression]


@dataclass(frozen=True)
class Program:
    body: tuple[Expression, ...] = field(default_factory=tuple)
