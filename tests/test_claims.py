"""
Unit tests for claim interpretation.
"""

import pytest

from jsonjwt.claims import (
    INVALID_DATE,
    INVALID_RELATIVE_TIME,
    absolute_time,
    describe_claims,
    describe_header,
    is_expired,
    relative_time,
    summarize_token,
)
from jsonjwt.token import decode_token


class TestIsExpired:
    """Tests for is_expired()."""

    def test_past_exp(self, now_ms, now_s):
        assert is_expired({"exp": now_s - 1}, now_ms) is True

    def test_future_exp(self, now_ms, now_s):
        assert is_expired({"exp": now_s + 1}, now_ms) is False

    def test_exp_equal_to_now_is_not_expired(self, now_ms, now_s):
        """The comparison is strict."""
        assert is_expired({"exp": now_s}, now_ms) is False

    def test_missing_exp_never_expires(self, now_ms):
        assert is_expired({"sub": "x"}, now_ms) is False

    @pytest.mark.parametrize("exp", ["123", None, True, [1]])
    def test_non_numeric_exp_never_expires(self, now_ms, exp):
        """Only numeric exp claims are interpreted."""
        assert is_expired({"exp": exp}, now_ms) is False


class TestRelativeTime:
    """Tests for relative_time()."""

    @pytest.mark.parametrize(
        "offset, expected",
        [
            (-10, "10 seconds ago"),
            (-59, "59 seconds ago"),
            (-60, "1 minutes ago"),
            (-90, "2 minutes ago"),
            (-3540, "59 minutes ago"),
            (-3541, "1 hours ago"),
            (-7200, "2 hours ago"),
            (-86400, "1 days ago"),
            (-86401, "2 days ago"),
            (-10 * 86400, "10 days ago"),
        ],
    )
    def test_past(self, now_ms, now_s, offset, expected):
        """Past times floor each unit from the same second difference."""
        assert relative_time(now_s + offset, now_ms) == expected

    @pytest.mark.parametrize(
        "offset, expected",
        [
            (0, "in 0 seconds"),
            (59, "in 59 seconds"),
            (60, "in 1 minutes"),
            (90 * 60, "in 1 hours"),
            (3599, "in 59 minutes"),
            (23 * 3600 + 3599, "in 23 hours"),
            (86400, "in 1 days"),
            (2 * 86400 + 5, "in 2 days"),
        ],
    )
    def test_future(self, now_ms, now_s, offset, expected):
        """Future times use "in N ..." phrasing."""
        assert relative_time(now_s + offset, now_ms) == expected

    def test_sub_second_past_rounds_down(self, now_ms, now_s):
        """Half a second in the past floors to -1 second."""
        assert relative_time(now_s - 0.5, now_ms) == "1 seconds ago"

    def test_fractional_now(self, now_s):
        """A now that is not a whole second shifts the floor."""
        assert relative_time(now_s - 10, now_s * 1000 + 1) == "11 seconds ago"

    @pytest.mark.parametrize("timestamp", [1e306, -1e306, 10 ** 400])
    def test_timestamp_beyond_millisecond_range(self, now_ms, timestamp):
        """Timestamps that overflow once scaled to milliseconds get a fixed text."""
        assert relative_time(timestamp, now_ms) == INVALID_RELATIVE_TIME
        assert relative_time(timestamp, float(now_ms)) == INVALID_RELATIVE_TIME


class TestAbsoluteTime:
    """Tests for absolute_time()."""

    def test_rfc7231(self, now_s):
        assert absolute_time(now_s) == "Tue, 14 Nov 2023 22:13:20 GMT"

    def test_epoch(self):
        assert absolute_time(0) == "Thu, 01 Jan 1970 00:00:00 GMT"

    def test_out_of_range(self):
        assert absolute_time(1e20) == INVALID_DATE


class TestDescribe:
    """Tests for the token render model."""

    def test_describe_claims(self, valid_payload, now_ms):
        """exp and iat are interpreted, other claims are raw JSON."""
        rows = {row.key: row for row in describe_claims(valid_payload, now_ms)}

        assert rows["exp"].label == "Expires"
        assert rows["exp"].relative == "in 2 days"
        assert rows["exp"].expired is False
        assert rows["iat"].label == "Issued at"
        assert rows["iat"].relative == "1 hours ago"
        assert rows["iat"].absolute.endswith("GMT")
        assert rows["roles"].json_text == '["admin","dev"]'
        assert rows["name"].json_text == '"Ada"'
        assert rows["name"].is_temporal is False

    def test_describe_keeps_payload_order(self, now_ms):
        keys = [row.key for row in describe_claims({"z": 1, "exp": 0, "a": 2}, now_ms)]
        assert keys == ["z", "exp", "a"]

    def test_expired_exp_row(self, expired_payload, now_ms):
        rows = describe_claims(expired_payload, now_ms)
        assert [r.expired for r in rows] == [False, True]

    def test_string_exp_not_interpreted(self, now_ms):
        rows = describe_claims({"exp": "tomorrow"}, now_ms)
        assert rows[0].relative is None
        assert rows[0].label == "exp"

    def test_header_rows_are_raw(self, sample_header):
        rows = describe_header(sample_header)
        assert [(r.label, r.json_text) for r in rows] == [("alg", '"HS256"'), ("typ", '"JWT"')]

    def test_summary(self, valid_token, now_ms):
        """The overview reports type, algorithm and temporal status."""
        summary = summarize_token(decode_token(valid_token).token, now_ms)
        assert summary.token_type == "JWT"
        assert summary.algorithm == "HS256"
        assert summary.status == "Valid"
        assert summary.issued == "1 hours ago"
        assert summary.expires == "in 2 days"

    def test_summary_expired(self, expired_token, now_ms):
        summary = summarize_token(decode_token(expired_token).token, now_ms)
        assert summary.status == "Expired"
        assert summary.issued is None

    def test_huge_timestamps_do_not_break_rows(self, make_token, now_ms):
        """A token that decodes is always describable, however large exp is."""
        token = decode_token(make_token({"alg": "none"}, {"iat": 10 ** 400, "exp": 1e306})).token
        rows = describe_claims(token.payload, now_ms)
        assert [r.relative for r in rows] == [INVALID_RELATIVE_TIME, INVALID_RELATIVE_TIME]
        assert [r.absolute for r in rows] == [INVALID_DATE, INVALID_DATE]
        summary = summarize_token(token, now_ms)
        assert summary.status == "Valid"
        assert summary.expires == INVALID_RELATIVE_TIME
