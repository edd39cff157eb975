"""
Claim interpretation for decoded tokens.

Only the two temporal claims, ``exp`` and ``iat``, get any meaning: both are
seconds since the Unix epoch. Every other header or payload entry is shown
as its raw JSON text.
"""

import math
from dataclasses import dataclass
from email.utils import formatdate
from typing import Any, Dict, List, Optional

from .token import DecodedToken
from .values import to_json_text

EXPIRY_CLAIM = "exp"
ISSUED_AT_CLAIM = "iat"
TEMPORAL_CLAIMS = (EXPIRY_CLAIM, ISSUED_AT_CLAIM)

CLAIM_LABELS = {
    EXPIRY_CLAIM: "Expires",
    ISSUED_AT_CLAIM: "Issued at",
}

INVALID_DATE = "Invalid Date"
INVALID_RELATIVE_TIME = "Invalid time"


def _is_timestamp(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints are exact, and may be too large to convert for isfinite()
    return isinstance(value, int) or math.isfinite(value)


def is_expired(payload: Dict[str, Any], now_ms: float) -> bool:
    """True iff ``exp`` is present and ``exp * 1000 < now_ms``."""
    exp = payload.get(EXPIRY_CLAIM)
    if not _is_timestamp(exp):
        return False
    return exp * 1000 < now_ms


def relative_time(timestamp: float, now_ms: float) -> str:
    """
    Human phrasing of a timestamp relative to now.

    Minutes, hours and days are each floor divisions of the same whole-second
    difference, so 90 seconds ago is "2 minutes ago" and in 90 minutes is
    "in 1 hours".

    Args:
        timestamp: Seconds since the epoch.
        now_ms: Current time in milliseconds since the epoch.

    Returns:
        E.g. "10 seconds ago", "in 3 days". A timestamp too large to express
        in milliseconds gives INVALID_RELATIVE_TIME.
    """
    try:
        diff_secs = math.floor((timestamp * 1000 - now_ms) / 1000)
    except OverflowError:
        return INVALID_RELATIVE_TIME
    diff_mins = diff_secs // 60
    diff_hours = diff_secs // 3600
    diff_days = diff_secs // 86400

    if diff_secs < 0:
        if diff_secs > -60:
            return f"{abs(diff_secs)} seconds ago"
        if diff_mins > -60:
            return f"{abs(diff_mins)} minutes ago"
        if diff_hours > -24:
            return f"{abs(diff_hours)} hours ago"
        return f"{abs(diff_days)} days ago"

    if diff_secs < 60:
        return f"in {diff_secs} seconds"
    if diff_mins < 60:
        return f"in {diff_mins} minutes"
    if diff_hours < 24:
        return f"in {diff_hours} hours"
    return f"in {diff_days} days"


def absolute_time(timestamp: float) -> str:
    """RFC 7231 date in UTC, e.g. ``Tue, 14 Nov 2023 22:13:20 GMT``."""
    try:
        return formatdate(timestamp, usegmt=True)
    except (OverflowError, OSError, ValueError):
        return INVALID_DATE


@dataclass(frozen=True)
class ClaimRow:
    """One header or payload entry as a view shows it."""

    key: str
    label: str
    value: Any
    json_text: str
    relative: Optional[str] = None
    absolute: Optional[str] = None
    expired: bool = False

    @property
    def is_temporal(self) -> bool:
        return self.relative is not None


@dataclass(frozen=True)
class TokenSummary:
    """The overview line of a decoded token."""

    token_type: str
    algorithm: str
    expired: bool
    issued: Optional[str] = None
    expires: Optional[str] = None

    @property
    def status(self) -> str:
        return "Expired" if self.expired else "Valid"


def describe_header(header: Dict[str, Any]) -> List[ClaimRow]:
    return [
        ClaimRow(key=key, label=key, value=value, json_text=to_json_text(value))
        for key, value in header.items()
    ]


def describe_claims(payload: Dict[str, Any], now_ms: float) -> List[ClaimRow]:
    """
    Build a row per payload entry, interpreting ``exp`` and ``iat``.

    A temporal claim that is not a number is shown like any other entry.
    """
    rows = []
    for key, value in payload.items():
        if key in TEMPORAL_CLAIMS and _is_timestamp(value):
            rows.append(
                ClaimRow(
                    key=key,
                    label=CLAIM_LABELS[key],
                    value=value,
                    json_text=to_json_text(value),
                    relative=relative_time(value, now_ms),
                    absolute=absolute_time(value),
                    expired=key == EXPIRY_CLAIM and value * 1000 < now_ms,
                )
            )
        else:
            rows.append(
                ClaimRow(key=key, label=key, value=value, json_text=to_json_text(value))
            )
    return rows


def summarize_token(token: DecodedToken, now_ms: float) -> TokenSummary:
    payload = token.payload
    iat = payload.get(ISSUED_AT_CLAIM)
    exp = payload.get(EXPIRY_CLAIM)
    return TokenSummary(
        token_type=token.token_type,
        algorithm=token.algorithm,
        expired=is_expired(payload, now_ms),
        issued=relative_time(iat, now_ms) if _is_timestamp(iat) else None,
        expires=relative_time(exp, now_ms) if _is_timestamp(exp) else None,
    )
