"""
Base64URL segment decoding.

Turns one dot-separated token segment into a JSON value, independent of any
token semantics. A segment whose length is 1 mod 4 can never be valid
base64 and is reported as a structural error; everything that fails after
padding is a soft decode failure.
"""

import logging

from jwcrypto.common import base64url_decode

from .errors import JsonSyntaxError, SegmentDecodeError, SegmentLengthError
from .values import JsonValue, try_parse_json_text

logger = logging.getLogger(__name__)


def check_segment_length(segment: str) -> None:
    """
    Ensure ``segment`` can be padded to a multiple of four characters.

    Remainders 0, 2 and 3 are padded with none, two and one ``=``.

    Raises:
        SegmentLengthError: If ``len(segment) % 4 == 1``.
    """
    if len(segment) % 4 == 1:
        raise SegmentLengthError(segment)


def decode_segment(segment: str) -> JsonValue:
    """
    Decode a base64url segment into the JSON value it encodes.

    Args:
        segment: One segment of a token, without padding.

    Returns:
        The parsed JSON value (any kind, not only objects).

    Raises:
        SegmentLengthError: The segment length is 1 mod 4.
        SegmentDecodeError: The bytes are not base64, UTF-8 or JSON.
    """
    check_segment_length(segment)
    try:
        raw = base64url_decode(segment)
        text = raw.decode("utf-8")
    except ValueError as e:
        logger.debug("Segment is not base64url-encoded UTF-8: %s", e)
        raise SegmentDecodeError(f"Could not decode segment: {e}") from e

    try:
        return try_parse_json_text(text)
    except JsonSyntaxError as e:
        logger.debug("Segment does not contain JSON: %s", e)
        raise SegmentDecodeError(f"Segment is not valid JSON: {e}") from e
