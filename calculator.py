from dataclasses import dataclass
import ast
import math
import operator
import re

ERROR = "Error"
DEGREES = "deg"
RADIANS = "rad"
ANGLE_UNITS = (DEGREES, RADIANS)

RESULT_DECIMALS = 10
# Magnitude from which results switch to exponent notation
EXPONENT_THRESHOLD = 1e21
# Largest n whose factorial is still a finite float
MAX_FACTORIAL = 170


class CalculationError(Exception):
    """Raised when a display expression cannot be turned into a finite number."""


# Display glyph -> evaluator function name. Single pass, so no rewrite can
# feed into another one.
_FUNCTION_NAMES = {
    "sin⁻¹": "asin",
    "cos⁻¹": "acos",
    "tan⁻¹": "atan",
    "sin": "sin",
    "cos": "cos",
    "tan": "tan",
    "ln": "ln",
    "log": "log10",
    "√": "sqrt",
}
_FUNCTION_RE = re.compile(
    "(" + "|".join(re.escape(name) for name in _FUNCTION_NAMES) + r")\("
)
_FACTORIAL_RE = re.compile(r"(?<![\d.])(\d+)!")
# Leading zeros of an integer run ("05"); Python rejects them as literals
_LEADING_ZEROS_RE = re.compile(r"(?<![\d.])0+(?=\d)")
_UNARY_CONTEXT = "(*/%+-^"

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Pow: operator.pow,
    # Truncated remainder, sign follows the dividend
    ast.Mod: math.fmod,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
    # sentinels produced by the factorial rewrite
    "nan": math.nan,
    "inf": math.inf,
}


def factorial(n: int) -> int:
    result = 1
    for i in range(2, n + 1):
        result *= i
    return result


def format_result(value: float) -> str:
    """Render a finite number the way the display shows it.

    Rounded to 10 decimals, trailing zeros and a bare decimal point removed.
    Magnitudes of 1e21 and above use the shortest exponent form (``1e+21``).
    """
    if not math.isfinite(value):
        raise CalculationError(f"Non-finite result: {value}")
    rounded = round(value, RESULT_DECIMALS)
    if abs(rounded) >= EXPONENT_THRESHOLD:
        return repr(rounded)
    text = f"{rounded:.{RESULT_DECIMALS}f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def _angle_functions(angle_unit: str) -> dict:
    if angle_unit == RADIANS:
        return {
            "sin": math.sin,
            "cos": math.cos,
            "tan": math.tan,
            "asin": math.asin,
            "acos": math.acos,
            "atan": math.atan,
        }
    return {
        "sin": lambda x: math.sin(math.radians(x)),
        "cos": lambda x: math.cos(math.radians(x)),
        "tan": lambda x: math.tan(math.radians(x)),
        "asin": lambda x: math.degrees(math.asin(x)),
        "acos": lambda x: math.degrees(math.acos(x)),
        "atan": lambda x: math.degrees(math.atan(x)),
    }


@dataclass
class Calculator:
    expression: str
    last_answer: str = "0"
    angle_unit: str = DEGREES

    def rewrite(self) -> str:
        """Turn the display string into text the safe evaluator understands."""
        expr = self.expression
        expr = expr.replace("×", "*").replace("÷", "/")
        expr = _LEADING_ZEROS_RE.sub("", expr)
        expr = expr.replace("π", "pi")
        expr = expr.replace("Ans", f"({self.last_answer})")
        expr = _FUNCTION_RE.sub(lambda m: _FUNCTION_NAMES[m.group(1)] + "(", expr)
        expr = _FACTORIAL_RE.sub(self._expand_factorial, expr)
        expr = expr.replace("^", "**")
        return expr

    @staticmethod
    def _expand_factorial(match) -> str:
        start = match.start()
        text = match.string
        # A '-' at the start or after an operator/'(' negates the operand
        if start > 0 and text[start - 1] == "-":
            if start == 1 or text[start - 2] in _UNARY_CONTEXT:
                return "nan"
        n = int(match.group(1))
        if n > MAX_FACTORIAL:
            return "inf"
        return str(factorial(n))

    def compute(self) -> float:
        if self.angle_unit not in ANGLE_UNITS:
            raise CalculationError(f"Unknown angle unit: {self.angle_unit}")
        expr = self.rewrite()
        if not expr.strip():
            raise CalculationError("Expression is empty")

        functions = {
            "ln": math.log,
            "log10": math.log10,
            "sqrt": math.sqrt,
        }
        functions.update(_angle_functions(self.angle_unit))

        try:
            tree = ast.parse(expr.strip(), mode="eval")
            result = _evaluate_node(tree, functions)
        except CalculationError:
            raise
        except (SyntaxError, ArithmeticError, ValueError, TypeError, RecursionError) as e:
            raise CalculationError(f"Invalid expression {self.expression!r}: {e}") from e

        if not math.isfinite(result):
            raise CalculationError(f"Non-finite result for {self.expression!r}")
        return result

    def evaluate(self) -> str:
        try:
            return format_result(self.compute())
        except CalculationError:
            return ERROR


def _evaluate_node(node: ast.AST, functions: dict) -> float:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body, functions)

    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise CalculationError(f"Unsupported literal: {node.value!r}")
        return float(node.value)

    if isinstance(node, ast.Name):
        if node.id in _CONSTANTS:
            return _CONSTANTS[node.id]
        raise CalculationError(f"Unsupported symbol: {node.id}")

    if isinstance(node, ast.BinOp):
        op_type = type(node.op)
        if op_type not in _BIN_OPS:
            raise CalculationError(f"Unsupported operator: {op_type.__name__}")
        left = _evaluate_node(node.left, functions)
        right = _evaluate_node(node.right, functions)
        return _real(_BIN_OPS[op_type](left, right))

    if isinstance(node, ast.UnaryOp):
        op_type = type(node.op)
        if op_type not in _UNARY_OPS:
            raise CalculationError(f"Unsupported unary operator: {op_type.__name__}")
        return _UNARY_OPS[op_type](_evaluate_node(node.operand, functions))

    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in functions:
            raise CalculationError("Only calculator functions can be called")
        if node.keywords or len(node.args) != 1:
            raise CalculationError(f"{node.func.id}() takes exactly one argument")
        value = _evaluate_node(node.args[0], functions)
        return _real(functions[node.func.id](value))

    raise CalculationError(f"Unsupported expression: {type(node).__name__}")


def _real(value) -> float:
    # float ** fractional exponent of a negative base yields a complex
    if isinstance(value, complex):
        raise CalculationError("Result is not a real number")
    return float(value)
