"""
jsonjwt - Inspect JSON as a navigable tree and decode JWTs.

This package provides the data-transformation core behind a JSON/JWT
inspector: path addressing and expansion state for arbitrary JSON, and
structural decoding plus claim interpretation for three-segment tokens.
Signatures are displayed, never verified.
"""

__version__ = "1.0.0"

# Path model and values
from .paths import JsonPath, child_of_array, child_of_object, last_segment_label
from .values import Kind, classify, format_value, is_container, parse_json_text

# Tree view model
from .tree import ExpansionState, TreeRow, enumerate_all_paths, iter_paths, render_rows

# Tokens
from .segments import decode_segment
from .token import DecodedToken, TokenErrorKind, TokenResult, decode_token, parse_token
from .claims import absolute_time, is_expired, relative_time

# Errors
from .errors import (
    InspectorError,
    JsonSyntaxError,
    SegmentDecodeError,
    SegmentLengthError,
    TokenDecodeError,
    TokenStructuralError,
)


def __getattr__(name):
    """Lazy loading of the session layer."""
    if name in ("InspectorSession", "Tab", "CopyRequest"):
        from . import session

        return getattr(session, name)
    raise AttributeError(f"module 'jsonjwt' has no attribute '{name}'")


__all__ = [
    "__version__",
    # Paths and values
    "JsonPath",
    "child_of_object",
    "child_of_array",
    "last_segment_label",
    "Kind",
    "classify",
    "format_value",
    "is_container",
    "parse_json_text",
    # Tree
    "ExpansionState",
    "TreeRow",
    "enumerate_all_paths",
    "iter_paths",
    "render_rows",
    # Tokens
    "decode_segment",
    "DecodedToken",
    "TokenErrorKind",
    "TokenResult",
    "decode_token",
    "parse_token",
    "is_expired",
    "relative_time",
    "absolute_time",
    # Session (lazy loaded)
    "InspectorSession",
    "Tab",
    "CopyRequest",
    # Errors
    "InspectorError",
    "JsonSyntaxError",
    "TokenStructuralError",
    "SegmentLengthError",
    "TokenDecodeError",
    "SegmentDecodeError",
]
