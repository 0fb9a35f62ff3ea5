"""Tree-walking evaluator for gune.

Dispatches on the closed set of node classes. Binary expressions evaluate the
left operand, then the right, then combine them. Mixed Float/Nil operands are
an error; two Nils give Nil without looking at the operator.
"""

from __future__ import annotations

import operator
from typing import Callable, assert_never

from gune import Expression, Node, RuntimeValue
from gune.errors import DivisionByZero, TypeMismatch, UnsupportedOperator
from gune.types.ast import BinaryExpression, Identifier, NilLiteral, NumericLiteral, Program
from gune.types.environment import Environment
from gune.types.values import Float, Nil, NilType


def _divide(left: float, right: float) -> float:
    if right == 0.0:
        raise DivisionByZero(left)
    return left / right


FLOAT_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
}


def evaluate(node: Node, env: Environment) -> RuntimeValue:
    match node:
        case Program(body=body):
            return evaluate_program(body, env)
        case NumericLiteral(value=value):
            return Float(value)
        case NilLiteral():
            return Nil
        case Identifier(symbol=symbol):
            return env.lookup(symbol)
        case BinaryExpression():
            return evaluate_binary(node, env)
    assert_never(node)


def evaluate_program(body, env: Environment) -> RuntimeValue:
    result: RuntimeValue = Nil
    for expr in body:
        result = evaluate(expr, env)
    return result


def evaluate_binary(node: BinaryExpression, env: Environment) -> RuntimeValue:
    """Post-order walk over nested binary expressions using explicit stacks.

    A node is pushed back as a pending combine step beneath its right and left
    operands, so the left subtree is fully evaluated before the right one and
    tree depth never turns into Python call depth.
    """
    values: list[RuntimeValue] = []
    work: list[tuple[bool, Expression]] = [(False, node)]
    while work:
        combine, expr = work.pop()
        if combine:
            rhs = values.pop()
            lhs = values.pop()
            values.append(combine_operands(expr.operator, lhs, rhs))
        elif isinstance(expr, BinaryExpression):
            work.append((True, expr))
            work.append((False, expr.right))
            work.append((False, expr.left))
        else:
            values.append(evaluate(expr, env))
    return values.pop()


def combine_operands(op: str, lhs: RuntimeValue, rhs: RuntimeValue) -> RuntimeValue:
    match lhs, rhs:
        case Float(value=left), Float(value=right):
            return Float(apply_float_operator(op, left, right))
        case NilType(), NilType():
            return Nil
    raise TypeMismatch(op, lhs, rhs)


def apply_float_operator(op: str, left: float, right: float) -> float:
    # '&' parses at multiplicative precedence but has no arithmetic meaning
    fn = FLOAT_OPERATORS.get(op)
    if fn is None:
        raise UnsupportedOperator(op)
    return fn(left, right)
