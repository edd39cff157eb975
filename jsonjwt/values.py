"""
Value classification and display formatting for JSON values.
"""

import json
import logging
import math
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .errors import JsonSyntaxError

logger = logging.getLogger(__name__)

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

OBJECT_PLACEHOLDER = "{...}"
ARRAY_PLACEHOLDER = "[...]"


class Kind(str, Enum):
    """The closed set of JSON value kinds."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def classify(value: JsonValue) -> Kind:
    """Return the kind of a parsed JSON value."""
    if value is None:
        return Kind.NULL
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, (int, float)):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, list):
        return Kind.ARRAY
    if isinstance(value, dict):
        return Kind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def is_container(kind: Kind) -> bool:
    return kind in (Kind.ARRAY, Kind.OBJECT)


def format_number(value: Union[int, float]) -> str:
    """
    Render a number the way a JavaScript view would (``String(n)``).

    Integral floats drop their ``.0`` so ``1.0`` parsed from text shows as ``1``;
    exponents are used below 1e-6 and from 1e21 (``1e-7``, ``1e+21``).
    """
    if not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    # Shortest round-trip digits, then JavaScript's placement rules
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(map(str, digits))
    k = len(digits)
    n = exponent + k
    prefix = "-" if sign else ""
    if k <= n <= 21:
        return prefix + digits + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * -n + digits
    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{prefix}{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"


def format_value(value: JsonValue, kind: Kind, quote_strings: bool) -> str:
    """
    Display text of a value in a collapsed or leaf row.

    Args:
        value: The JSON value.
        kind: Its kind, as returned by classify().
        quote_strings: Wrap strings in double quotes when True.

    Returns:
        The display string; containers render as a placeholder.
    """
    if kind is Kind.STRING:
        return f'"{value}"' if quote_strings else value
    if kind is Kind.OBJECT:
        return OBJECT_PLACEHOLDER
    if kind is Kind.ARRAY:
        return ARRAY_PLACEHOLDER
    if kind is Kind.NULL:
        return "null"
    if kind is Kind.BOOLEAN:
        return "true" if value else "false"
    return format_number(value)


def summarize(value: JsonValue, kind: Kind) -> Optional[str]:
    """Child count summary for a container row, None for leaves."""
    if kind is Kind.ARRAY:
        return f"{len(value)} items"
    if kind is Kind.OBJECT:
        return f"{len(value)} properties"
    return None


def _reject_constant(name: str) -> None:
    raise ValueError(f"Invalid JSON literal: {name}")


def try_parse_json_text(text: str) -> JsonValue:
    """
    Parse strict JSON text.

    Raises:
        JsonSyntaxError: If the text is not valid JSON.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise JsonSyntaxError(str(e)) from e


def parse_json_text(text: str) -> Optional[JsonValue]:
    """Parse JSON text, returning None on any failure."""
    try:
        return try_parse_json_text(text)
    except JsonSyntaxError as e:
        logger.debug("Input is not valid JSON: %s", e)
        return None


def to_json_text(value: JsonValue) -> str:
    """Compact JSON text of a value, as shown in the token views."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def pretty_json(text: str, indent: int = 2) -> str:
    """
    Re-format JSON text with the given indentation.

    Raises:
        JsonSyntaxError: If the text is not valid JSON.
    """
    value = try_parse_json_text(text)
    return json.dumps(value, indent=indent, ensure_ascii=False)
