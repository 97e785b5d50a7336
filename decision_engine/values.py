"""JSON-like value model shared by the evaluator, node handlers and executor.

A ``Value`` is one of ``None``, ``bool``, ``float``, ``str``, ``dict[str, Value]``
or ``list[Value]``. Numbers are always floats once they enter the model.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List, Union

from pydantic import BaseModel


Value = Union[None, bool, float, str, Dict[str, "Value"], List["Value"]]

NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

EQUALITY_EPSILON = 0.0001


def to_value(obj: Any) -> Value:
    """Normalize a Python object into the value model."""
    if obj is None or isinstance(obj, (bool, str)):
        return obj
    if isinstance(obj, (int, float)):
        return float(obj)
    if isinstance(obj, BaseModel):
        return to_value(obj.model_dump(by_alias=True))
    if isinstance(obj, dict):
        return {str(key): to_value(item) for key, item in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_value(item) for item in obj]
    raise TypeError(f"Unsupported value type: {type(obj).__name__}")


# =============================================================================
# Literal parsing
# =============================================================================


def parse_integer(text: str) -> float | None:
    text = text.strip()
    if INTEGER_PATTERN.match(text):
        return float(int(text))
    return None


def parse_number(text: str) -> float | None:
    text = text.strip()
    if NUMBER_PATTERN.match(text):
        return float(text)
    return None


def parse_bool(text: str) -> bool | None:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def is_quoted(text: str) -> bool:
    """True if ``text`` is wrapped in double quotes."""
    return len(text) >= 2 and text.startswith('"') and text.endswith('"')


# =============================================================================
# Coercion
# =============================================================================


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Value) -> float | None:
    """Coerce a value to a float, or None when it is not numeric.

    Numbers coerce as-is and strings coerce when they hold a plain decimal
    literal. Booleans are never numeric.
    """
    if is_number(value):
        return float(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        return parse_number(value)
    return None


def values_equal(left: Value, right: Value) -> bool:
    """Structural equality. Booleans never equal numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            values_equal(left[key], right[key]) for key in left
        )
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )
    return left == right


def condition_truth(value: Value) -> bool:
    """Map an evaluated condition to a boolean."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return len(value) > 0
    return value is not None


# =============================================================================
# Field access
# =============================================================================


def lookup_property(context: Value, name: str) -> tuple[bool, Value]:
    """Look up a top-level property. Returns (found, value)."""
    if isinstance(context, dict) and name in context:
        return True, context[name]
    return False, None


def get_path(context: Value, path: str) -> Value:
    """Walk a dotted path through nested objects; missing steps yield None."""
    current = context
    for part in path.split("."):
        found, current = lookup_property(current, part)
        if not found:
            return None
    return current


def set_path(target: Dict[str, Value], path: str, value: Value) -> None:
    """Write ``value`` at a dotted path, creating intermediate objects."""
    parts = path.split(".")
    current = target
    for part in parts[:-1]:
        if part not in current:
            current[part] = {}
        child = current[part]
        if not isinstance(child, dict):
            raise ValueError(
                f"Cannot set field '{path}': '{part}' already holds a non-object value"
            )
        current = child
    current[parts[-1]] = value


# =============================================================================
# Decision table cells
# =============================================================================


def format_number(number: float) -> str:
    if math.isfinite(number) and number == int(number):
        return str(int(number))
    return repr(number)


def cell_text(cell: Any) -> str:
    """Render a decision table cell as condition text."""
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if is_number(cell):
        return format_number(float(cell))
    if isinstance(cell, str):
        return cell
    return json.dumps(cell)


def is_blank_cell(cell: Any) -> bool:
    return not cell_text(cell).strip()
