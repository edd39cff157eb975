"""
Token parsing: structural validation and decoding of the three segments.

The signature segment is kept verbatim. Nothing here verifies signatures;
this is for inspection only.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .errors import InspectorError, TokenDecodeError, TokenStructuralError
from .segments import decode_segment
from .values import Kind, classify

logger = logging.getLogger(__name__)

SEGMENT_COUNT = 3
DEFAULT_TOKEN_TYPE = "JWT"
UNKNOWN_ALGORITHM = "Unknown"


@dataclass(frozen=True)
class DecodedToken:
    """Holds the three parts of a decoded token."""

    header: Dict[str, Any]
    payload: Dict[str, Any]
    signature: str

    @property
    def token_type(self) -> str:
        return str(self.header.get("typ") or DEFAULT_TOKEN_TYPE)

    @property
    def algorithm(self) -> str:
        return str(self.header.get("alg") or UNKNOWN_ALGORITHM)


class TokenErrorKind(str, Enum):
    INVALID_FORMAT = "InvalidFormat"
    DECODE_ERROR = "DecodeError"


@dataclass(frozen=True)
class TokenResult:
    """Outcome of decode_token(): a token, or the kind of failure."""

    ok: bool
    token: Optional[DecodedToken] = None
    kind: Optional[TokenErrorKind] = None
    message: Optional[str] = None


def strip_wrapping_quotes(text: str) -> str:
    """Remove one pair of double quotes around a token pasted as a JSON string."""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def _decode_object(segment: str, label: str) -> Dict[str, Any]:
    try:
        value = decode_segment(segment)
    except TokenStructuralError:
        raise
    except TokenDecodeError as e:
        raise TokenDecodeError(f"Could not decode {label}: {e}") from e

    if classify(value) is not Kind.OBJECT:
        raise TokenDecodeError(
            f"Could not decode {label}: expected a JSON object, got {classify(value).value}"
        )
    return value


def parse_token(raw: str) -> DecodedToken:
    """
    Split and decode a token string.

    Args:
        raw: Token text, optionally wrapped in one pair of double quotes.

    Returns:
        The decoded header, payload and raw signature.

    Raises:
        TokenStructuralError: Not three segments, or a segment that cannot be padded.
        TokenDecodeError: Header or payload is not a base64url-encoded JSON object.
    """
    parts = strip_wrapping_quotes(raw).split(".")
    if len(parts) != SEGMENT_COUNT:
        raise TokenStructuralError(
            f"Invalid JWT format: expected {SEGMENT_COUNT} parts "
            f"(header.payload.signature), got {len(parts)}"
        )

    header = _decode_object(parts[0], "header")
    payload = _decode_object(parts[1], "payload")
    return DecodedToken(header=header, payload=payload, signature=parts[2])


def decode_token(raw: str) -> TokenResult:
    """
    Decode a token without raising.

    Example:
        >>> result = decode_token("only.two")
        >>> result.ok, result.kind
        (False, <TokenErrorKind.INVALID_FORMAT: 'InvalidFormat'>)
    """
    try:
        token = parse_token(raw)
    except TokenStructuralError as e:
        logger.debug("Token rejected as malformed: %s", e)
        return TokenResult(ok=False, kind=TokenErrorKind.INVALID_FORMAT, message=str(e))
    except InspectorError as e:
        logger.debug("Token could not be decoded: %s", e)
        return TokenResult(ok=False, kind=TokenErrorKind.DECODE_ERROR, message=str(e))
    return TokenResult(ok=True, token=token)
