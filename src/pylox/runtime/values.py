"""
Run-time value helpers for the interpreter.

Lox values are plain Python objects:

    Lox type    Python representation
    nil         None
    boolean     bool
    number      float
    string      str
"""

import math
from typing import Any


def is_number(value: Any) -> bool:
    """Check for a Lox number. bool is excluded even though it is an int."""
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    """nil and false are falsey; everything else, 0 and "" included, is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: Any, right: Any) -> bool:
    """
    Value equality without coercion.

    Values of different run-time types are never equal, so true != 1 and
    "1" != 1 even though Python would say otherwise for the first.

    Numbers compare by identity of value rather than IEEE rules: nan equals
    nan, and 0 and -0 are different.
    """
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    if type(left) is not type(right):
        return False
    if isinstance(left, float):
        return _same_number(left, right)
    return left == right


def _same_number(left: float, right: float) -> bool:
    if math.isnan(left) or math.isnan(right):
        return math.isnan(left) and math.isnan(right)
    return left == right and math.copysign(1.0, left) == math.copysign(1.0, right)


def stringify(value: Any) -> str:
    """Render a value the way print shows it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def type_name(value: Any) -> str:
    """Name of a value's run-time type, for debug output."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__
