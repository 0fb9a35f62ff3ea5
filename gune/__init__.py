# Core type aliases for gune's data model.
# Syntax trees are frozen dataclasses (gune.types.ast) and runtime values are
# Float / Nil (gune.types.values). The aliases below keep signatures readable
# across reader, evaluator and tooling code.

from __future__ import annotations

from typing import Union

from gune.types.ast import BinaryExpression, Identifier, NilLiteral, NumericLiteral, Program
from gune.types.values import Float, NilType

__version__ = "0.0.1"

# Any node the parser can place inside a Program body
Expression = Union[NumericLiteral, NilLiteral, Identifier, BinaryExpression]
# Anything the evaluator accepts
Node = Union[Program, Expression]
# Evaluated values
RuntimeValue = Union[Float, NilType]
