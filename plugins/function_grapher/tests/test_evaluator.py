import math

import pytest

from plugins.function_grapher.core import (
    DomainError,
    Function,
    Instruction,
    Operator,
    Program,
    StackError,
    compile_expression,
    evaluate,
)


def _eval(text: str, x: float = 0.0) -> float:
    return evaluate(compile_expression(text), x)


def test_functions():
    assert _eval("sqrt(x)", 4) == 2
    assert _eval("log(x)", 1000) == pytest.approx(3)
    assert _eval("ln(e)") == pytest.approx(1)
    assert _eval("abs(x)", -2.5) == 2.5
    assert _eval("sin(pi/2)") == pytest.approx(1)
    assert _eval("cos(0)") == 1
    assert _eval("tan(pi/4)") == pytest.approx(1)


def test_fractional_and_negative_exponents():
    assert _eval("x^0.5", 9) == pytest.approx(3)
    assert _eval("x^-1", 4) == 0.25
    assert _eval("(-2)^3") == -8


@pytest.mark.parametrize(
    ("text", "x"),
    [
        ("sqrt(x)", -1),
        ("log(x)", 0),
        ("ln(x)", -3),
        ("1/x", 0),
        ("(-8)^(1/3)", 0),
        ("0^-1", 0),
        ("10^x", 400),
        ("x*x", 1e200),
    ],
)
def test_domain_failures_are_explicit(text, x):
    with pytest.raises(DomainError):
        _eval(text, x)


def test_domain_error_is_not_a_stack_error():
    with pytest.raises(DomainError) as excinfo:
        _eval("sqrt(x)", -1)
    assert not isinstance(excinfo.value, StackError)


def test_stack_underflow_is_reported():
    program = Program((Instruction.push_const(1), Instruction.apply(Operator.ADD)))
    with pytest.raises(StackError):
        evaluate(program, 0)


def test_function_on_empty_stack_is_reported():
    program = Program((Instruction.call(Function.SIN),))
    with pytest.raises(StackError):
        evaluate(program, 0)


def test_leftover_values_are_reported():
    program = Program((Instruction.push_const(1), Instruction.push_var()))
    with pytest.raises(StackError):
        evaluate(program, 0)


def test_empty_program_is_reported():
    with pytest.raises(StackError):
        evaluate(Program(()), 0)


def test_result_is_always_finite_float():
    program = compile_expression("x^3 - 2x + sin(x)")
    for x in (-100.0, -1.5, 0.0, 0.1, 42.0):
        value = evaluate(program, x)
        assert isinstance(value, float)
        assert math.isfinite(value)

