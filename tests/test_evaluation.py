import math
from functools import reduce
from operator import sub

import pytest
from hypothesis import given, strategies as st

from gune.errors import DivisionByZero, GuneError, TypeMismatch, UndefinedVariable, UnsupportedOperator
from gune.evaluation.evaluator import evaluate
from gune.reader.parser import parse
from gune.types.ast import BinaryExpression, Identifier, NumericLiteral, Program
from gune.types.environment import Environment
from gune.types.values import Float, Nil, render


def run(source, env):
    return evaluate(parse(source), env)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("2+3*4", 14),
        ("8-3-2", 3),
        ("(2+3)*4", 20),
        ("10/4", 2.5),
        ("100/8/5", 2.5),
        ("2*(3+(4-1))", 12),
        ("0-5", -5),
        ("7", 7),
        ("1 2 3", 3),
    ]
)
def test_arithmetic(env, source, expected):
    assert run(source, env) == Float(expected)


@pytest.mark.parametrize("source", ["", "nil", "nil+nil", "nil & nil", "(nil*nil)/nil", "1 nil"])
def test_nil_results(env, source):
    assert run(source, env) is Nil


@pytest.mark.parametrize("source", ["nil+1", "1-nil", "nil & 1", "1 & nil", "(nil+nil)*2"])
def test_mixed_operands_are_type_mismatch(env, source):
    with pytest.raises(TypeMismatch):
        run(source, env)


def test_type_mismatch_payload(env):
    with pytest.raises(TypeMismatch) as info:
        run("nil + 1", env)
    assert info.value.operator == "+"
    assert info.value.left is Nil
    assert info.value.right == Float(1)


@pytest.mark.parametrize("source", ["5/0", "5/(3-3)", "0/0", "1/(0*7)"])
def test_division_by_zero(env, source):
    with pytest.raises(DivisionByZero):
        run(source, env)


def test_ampersand_has_no_semantics(env):
    with pytest.raises(UnsupportedOperator) as info:
        run("2 & 3", env)
    assert info.value.operator == "&"


def test_unknown_operator_node(env):
    with pytest.raises(UnsupportedOperator):
        evaluate(BinaryExpression("%", NumericLiteral(1.0), NumericLiteral(2.0)), env)


def test_identifier_lookup(env):
    env.declare("x", Float(5))
    assert run("x*2", env) == Float(10)
    assert run("x", env.child()) == Float(5)


def test_undefined_identifier(env):
    with pytest.raises(UndefinedVariable) as info:
        evaluate(Identifier("y"), env)
    assert info.value.name == "y"


def test_left_operand_is_evaluated_first(env):
    with pytest.raises(UndefinedVariable):
        run("y + (1/0)", env)
    with pytest.raises(DivisionByZero):
        run("(1/0) + y", env)


def test_failure_aborts_whole_program(env):
    env.declare("x", Float(1))
    with pytest.raises(DivisionByZero):
        run("x 1/0 x", env)


def test_empty_program_node(env):
    assert evaluate(Program(), env) is Nil


def test_evaluation_is_deterministic(env):
    env.declare("x", Float(3))
    program = parse("x * (x - 1) / 2")
    assert evaluate(program, env) == evaluate(program, env) == Float(3)


VARIABLES = {"x": Float(3), "y": Float(0)}

expressions = st.recursive(
    st.one_of(
        st.integers(min_value=0, max_value=1000).map(str),
        st.sampled_from(["x", "y", "z", "nil"]),
    ),
    lambda inner: st.tuples(inner, st.sampled_from("+-*/&"), inner).map(lambda t: f"({t[0]} {t[1]} {t[2]})"),
    max_leaves=20,
)


def _observe(program, env):
    try:
        return render(evaluate(program, env))
    except GuneError as ex:
        return ex.kind, str(ex)


@given(expressions)
def test_repeated_evaluation_agrees(source):
    env = Environment()
    env.update(VARIABLES)
    program = parse(source)
    assert _observe(program, env) == _observe(program, env)


def test_long_chain_evaluates(env):
    source = "+".join(["1"] * 2000)
    assert run(source, env) == Float(2000)


def _chain(depth, right_nested):
    node = NumericLiteral(1.0)
    for _ in range(depth):
        if right_nested:
            node = BinaryExpression("+", NumericLiteral(1.0), node)
        else:
            node = BinaryExpression("+", node, NumericLiteral(1.0))
    return node


@pytest.mark.parametrize("right_nested", [False, True])
def test_deep_trees_evaluate(env, right_nested):
    assert evaluate(_chain(5000, right_nested), env) == Float(5001)


def test_deep_tree_keeps_left_first_order(env):
    node = BinaryExpression("+", Identifier("y"), _chain(3000, True))
    with pytest.raises(UndefinedVariable):
        evaluate(BinaryExpression("+", node, BinaryExpression("/", NumericLiteral(1.0), NumericLiteral(0.0))), env)


@given(st.lists(st.integers(min_value=0, max_value=10_000), min_size=1, max_size=12))
def test_subtraction_folds_left(numbers):
    source = " - ".join(str(n) for n in numbers)
    assert evaluate(parse(source), Environment()) == Float(reduce(sub, numbers))


@pytest.mark.parametrize(
    "value,text",
    [
        (Float(14.0), "14"),
        (Float(0.5), "0.5"),
        (Float(-3.0), "-3"),
        (Float(2.5), "2.5"),
        (Float(1e16), "1e+16"),
        (Float(math.pi), "3.141592653589793"),
        (Float(0.1 + 0.2), "0.30000000000000004"),
        (Nil, "nil"),
    ]
)
def test_render(value, text):
    assert render(value) == text
