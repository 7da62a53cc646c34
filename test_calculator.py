"""Tests for the display-expression evaluator."""

import pytest

from calculator import Calculator, CalculationError, ERROR, RADIANS, factorial, format_result


def evaluate(expression, **kwargs):
    return Calculator(expression=expression, **kwargs).evaluate()


@pytest.mark.parametrize("expression, expected", [
    ("2+3×4", "14"),
    ("(2+3)×4", "20"),
    ("10÷4", "2.5"),
    ("1÷3", "0.3333333333"),
    ("0.1+0.2", "0.3"),
    ("2^10", "1024"),
    ("2^-1", "0.5"),
    ("-3+5", "2"),
    ("10%3", "1"),
    ("-7%3", "-1"),
    ("√(16)", "4"),
    ("log(1000)", "3"),
    ("ln(e)", "1"),
    ("e", "2.7182818285"),
    ("π", "3.1415926536"),
    ("2e3", "2000"),
    ("10+05", "15"),
    ("3×007", "21"),
    ("00", "0"),
    ("0.05+1", "1.05"),
])
def test_arithmetic(expression, expected):
    assert evaluate(expression) == expected


def test_rewrite_uses_evaluator_names():
    calc = Calculator(expression="sin⁻¹(1)+√(4)×2^3÷log(10)+ln(π)")
    assert calc.rewrite() == "asin(1)+sqrt(4)*2**3/log10(10)+ln(pi)"


def test_degree_mode_converts_angles():
    assert evaluate("sin(30)") == "0.5"
    assert evaluate("cos(90)") == "0"
    assert evaluate("tan(45)") == "1"
    assert evaluate("sin⁻¹(1)") == "90"
    assert evaluate("cos⁻¹(0)") == "90"


def test_radian_mode_uses_raw_angles():
    assert evaluate("sin(π÷2)", angle_unit=RADIANS) == "1"
    assert evaluate("cos(π)", angle_unit=RADIANS) == "-1"
    assert evaluate("sin(30)", angle_unit=RADIANS) == "-0.9880316241"


def test_factorial():
    assert factorial(0) == 1
    assert factorial(5) == 120
    assert evaluate("5!") == "120"
    assert evaluate("0!") == "1"
    assert evaluate("3!+1") == "7"
    assert evaluate("2-3!") == "-4"


@pytest.mark.parametrize("expression", ["-5!", "(-3)!", "2×-3!", "2.5!", "171!"])
def test_factorial_errors(expression):
    assert evaluate(expression) == ERROR


def test_large_factorial_uses_exponent_form():
    assert "e+306" in evaluate("170!")


def test_ans_substitution():
    assert evaluate("Ans×2", last_answer="21") == "42"
    # negative answers stay grouped under the power operator
    assert evaluate("Ans^2", last_answer="-5") == "25"
    assert evaluate("Ans") == "0"


@pytest.mark.parametrize("expression", [
    "5÷0",
    "5%0",
    "(2+3",
    "2+",
    "×",
    "",
    "   ",
    "Error",
    "√(-1)",
    "ln(0)",
    "(-8)^(1÷3)",
    "10^400",
    "9^9^9",
    "sin(90",
])
def test_errors(expression):
    assert evaluate(expression) == ERROR


@pytest.mark.parametrize("expression", [
    "__import__('os')",
    "(1).real",
    "[1, 2]",
    "True",
    "'abc'",
    "sin(1, 2)",
    "lambda: 1",
])
def test_only_arithmetic_is_evaluated(expression):
    with pytest.raises(CalculationError):
        Calculator(expression=expression).compute()


def test_unknown_angle_unit():
    with pytest.raises(CalculationError):
        Calculator(expression="1", angle_unit="grad").compute()


def test_evaluation_is_deterministic():
    expression = "sin(30)+√(2)×π÷7!"
    assert evaluate(expression) == evaluate(expression)


def test_format_result():
    assert format_result(14.0) == "14"
    assert format_result(123.45) == "123.45"
    assert format_result(-0.0) == "0"
    assert format_result(1e-11) == "0"
    assert format_result(1e20) == "100000000000000000000"
    assert format_result(1e21) == "1e+21"
    with pytest.raises(CalculationError):
        format_result(float("inf"))
    with pytest.raises(CalculationError):
        format_result(float("nan"))
