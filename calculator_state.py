"""Calculator application state and its reducer.

All mutable calculator data (display, equation trace, memory register, last
answer, computation log and UI flags) lives in one immutable ``AppState``.
Every user interaction is an ``Action`` and ``reduce(state, action)`` returns
the next state, so the keypad, the keyboard and the HTTP routes all share the
same transitions.
"""

from dataclasses import dataclass, field, replace, asdict
from typing import Any, Optional
import logging
import random
import re
import time
import uuid

import config
from calculator import Calculator, CalculationError, ERROR, ANGLE_UNITS, DEGREES, format_result

logger = logging.getLogger(__name__)

# Action types
INPUT = "input"
FUNCTION = "function"
CONSTANT = "constant"
BACKSPACE = "backspace"
CLEAR = "clear"
EVALUATE = "evaluate"
MEMORY_ADD = "memory_add"
MEMORY_SUBTRACT = "memory_subtract"
MEMORY_RECALL = "memory_recall"
RANDOM = "random"
SET_ANGLE_UNIT = "set_angle_unit"
OPEN_ADVANCED = "open_advanced"
CLOSE_ADVANCED = "close_advanced"
OPEN_LOG = "open_log"
CLOSE_LOG = "close_log"
ADVANCED_STARTED = "advanced_started"
ADVANCED_SETTLED = "advanced_settled"
CLEAR_HISTORY = "clear_history"

# Record kinds
ARITHMETIC = "arithmetic"
ADVANCED = "advanced"

IMAGE_ONLY_INPUT = "[Image Input]"

FUNCTIONS = ("sin", "cos", "tan", "sin⁻¹", "cos⁻¹", "tan⁻¹", "ln", "log", "√")
CONSTANTS = ("π", "e", "Ans")
INPUT_CHARS = set("0123456789.+-×÷()%^!e")

KEY_OPERATORS = {"+", "-", "*", "/", "(", ")", ".", "%", "^"}
KEY_GLYPHS = {"*": "×", "/": "÷"}

# Same prefix rule as a browser's parseFloat
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class ComputationRecord:
    id: str
    kind: str
    input: str
    output: str
    timestamp: int

    @classmethod
    def create(cls, kind: str, input: str, output: str) -> "ComputationRecord":
        return cls(
            id=uuid.uuid4().hex,
            kind=kind,
            input=input,
            output=output,
            timestamp=int(time.time() * 1000),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Action:
    type: str
    value: Any = None


@dataclass(frozen=True)
class AppState:
    display: str = "0"
    equation: str = ""
    angle_unit: str = DEGREES
    memory: float = 0.0
    last_answer: str = "0"
    log: tuple = field(default_factory=tuple)
    advanced_open: bool = False
    log_open: bool = False
    processing: bool = False

    @property
    def is_error(self) -> bool:
        return self.display == ERROR

    def history(self) -> list:
        """Log records newest first, as the log panel lists them."""
        return list(reversed(self.log))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["log"] = [record.to_dict() for record in self.log]
        return data

    @classmethod
    def default(cls) -> "AppState":
        return cls(angle_unit=config.DEFAULT_ANGLE_UNIT)


def _append_text(state: AppState, text: str) -> AppState:
    # Error and a lone "0" are replaced; "0" followed by "." keeps the zero
    if state.is_error:
        return replace(state, display=text)
    if state.display == "0" and text != ".":
        return replace(state, display=text)
    return replace(state, display=state.display + text)


def _append_record(state: AppState, record: ComputationRecord) -> tuple:
    log = state.log + (record,)
    limit = config.HISTORY_LIMIT
    if limit and len(log) > limit:
        log = log[-limit:]
    return log


def _leading_number(display: str) -> Optional[float]:
    match = _LEADING_NUMBER.match(display)
    if not match:
        return None
    return float(match.group(0))


def evaluate(state: AppState) -> AppState:
    calc = Calculator(
        expression=state.display,
        last_answer=state.last_answer,
        angle_unit=state.angle_unit,
    )
    try:
        value = calc.compute()
        result = format_result(value)
    except CalculationError as e:
        logger.debug("Evaluation failed: %s", e)
        return replace(state, display=ERROR)

    record = ComputationRecord.create(ARITHMETIC, state.display, result)
    return replace(
        state,
        display=result,
        equation=f"{state.display} =",
        last_answer=result,
        log=_append_record(state, record),
    )


def _check_input(value) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError("Input value must be a non-empty string")
    unknown = set(value) - INPUT_CHARS
    if unknown:
        raise ValueError(f"Unsupported input characters: {''.join(sorted(unknown))}")
    return value


def reduce(state: AppState, action: Action) -> AppState:
    """Apply one action and return the next state.

    Raises:
        ValueError: unknown action type or invalid action value
    """
    kind = action.type

    if kind == INPUT:
        return _append_text(state, _check_input(action.value))

    if kind == FUNCTION:
        if action.value not in FUNCTIONS:
            raise ValueError(f"Unknown function: {action.value}")
        return _append_text(state, action.value + "(")

    if kind == CONSTANT:
        if action.value not in CONSTANTS:
            raise ValueError(f"Unknown constant: {action.value}")
        return _append_text(state, action.value)

    if kind == RANDOM:
        return _append_text(state, f"{random.random():.4f}")

    if kind == BACKSPACE:
        if state.is_error:
            return replace(state, display="0", equation="")
        display = state.display[:-1] if len(state.display) > 1 else "0"
        return replace(state, display=display)

    if kind == CLEAR:
        return replace(state, display="0", equation="")

    if kind == EVALUATE:
        return evaluate(state)

    if kind in (MEMORY_ADD, MEMORY_SUBTRACT):
        current = _leading_number(state.display)
        if current is None:
            return state
        if kind == MEMORY_ADD:
            return replace(state, memory=state.memory + current)
        return replace(state, memory=state.memory - current)

    if kind == MEMORY_RECALL:
        try:
            return replace(state, display=format_result(state.memory))
        except CalculationError:
            return replace(state, display=ERROR)

    if kind == SET_ANGLE_UNIT:
        if action.value not in ANGLE_UNITS:
            raise ValueError(f"Unknown angle unit: {action.value}")
        return replace(state, angle_unit=action.value)

    if kind == OPEN_ADVANCED:
        return replace(state, advanced_open=True)

    if kind == CLOSE_ADVANCED:
        return replace(state, advanced_open=False)

    if kind == OPEN_LOG:
        return replace(state, log_open=True)

    if kind == CLOSE_LOG:
        return replace(state, log_open=False)

    if kind == ADVANCED_STARTED:
        if state.processing:
            return state
        return replace(state, processing=True)

    if kind == ADVANCED_SETTLED:
        value = action.value or {}
        text = value.get("input") or IMAGE_ONLY_INPUT
        record = ComputationRecord.create(ADVANCED, text, str(value.get("output", "")))
        return replace(
            state,
            log=_append_record(state, record),
            processing=False,
            advanced_open=False,
            log_open=True,
        )

    if kind == CLEAR_HISTORY:
        return replace(state, log=())

    raise ValueError(f"Unknown action type: {kind}")


def action_for_key(key: str) -> Optional[Action]:
    """Map a keyboard key to the action the keypad would send, or None."""
    if not key:
        return None
    if len(key) == 1 and key in "0123456789":
        return Action(INPUT, key)
    if key in KEY_OPERATORS:
        return Action(INPUT, KEY_GLYPHS.get(key, key))
    if key in ("Enter", "="):
        return Action(EVALUATE)
    if key == "Backspace":
        return Action(BACKSPACE)
    if key == "Escape":
        return Action(CLEAR)
    return None
