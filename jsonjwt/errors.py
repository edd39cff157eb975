"""
Error taxonomy for jsonjwt.

Every failure the core can produce derives from InspectorError. The public
boundaries (parse_json_text, decode_token) absorb these and hand back
discriminated values; the lower-level functions raise them.
"""


class InspectorError(Exception):
    """Base class for all jsonjwt errors."""


class JsonSyntaxError(InspectorError):
    """Raised when text is not valid JSON."""


class TokenStructuralError(InspectorError):
    """Raised when a token does not have the shape of a three-segment token."""


class SegmentLengthError(TokenStructuralError):
    """Raised when a segment length is 1 mod 4 (no valid base64 has it)."""

    def __init__(self, segment: str):
        self.segment = segment
        super().__init__(
            f"Invalid base64 string: segment of length {len(segment)} cannot be padded"
        )


class TokenDecodeError(InspectorError):
    """Raised when a segment is well-shaped but does not decode to a JSON object."""


class SegmentDecodeError(TokenDecodeError):
    """Raised when a segment's bytes are not base64-encoded JSON text."""
