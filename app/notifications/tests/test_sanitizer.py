"""
Tests for push payload sanitization.

Test Classes:
    TestTruncate: Length bounds and the ellipsis
    TestSanitize: Field bounds and the data whitelist
"""

from notifications.sanitizer import (
    MAX_BODY_LENGTH,
    MAX_DATA_STRING_LENGTH,
    MAX_TITLE_LENGTH,
    sanitize,
    sanitize_data,
    truncate,
)
from notifications.types import NotificationPayload


class TestTruncate:
    def test_short_value_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_long_value_ends_with_ellipsis(self):
        result = truncate("a" * 300, MAX_TITLE_LENGTH)

        assert len(result) == MAX_TITLE_LENGTH
        assert result.endswith("…")

    def test_trailing_whitespace_trimmed_before_ellipsis(self):
        assert truncate("abc   defgh", 7) == "abc…"


class TestSanitize:
    def test_title_and_body_are_bounded(self):
        sanitized = sanitize(NotificationPayload(title="t" * 300, body="b" * 1000))

        assert len(sanitized.title) == MAX_TITLE_LENGTH
        assert len(sanitized.body) == MAX_BODY_LENGTH

    def test_unlisted_keys_are_dropped(self):
        data = sanitize_data(
            {"type": "reply", "commentId": "0xabc123", "secret": "x", "reactionType": "like"}
        )

        assert data == {"type": "reply", "commentId": "0xabc123"}

    def test_long_strings_are_cut(self):
        data = sanitize_data({"type": "s" * 1000})

        assert len(data["type"]) == MAX_DATA_STRING_LENGTH
        assert data["type"].endswith("…")

    def test_short_strings_are_untouched(self):
        assert sanitize_data({"type": "reply"}) == {"type": "reply"}

    def test_hex_identifiers_are_kept_whole(self):
        comment_id = "0x" + "f" * 400

        assert sanitize_data({"commentId": comment_id}) == {"commentId": comment_id}

    def test_nested_values_are_dropped(self):
        assert sanitize_data({"type": {"nested": True}, "parentId": [1, 2]}) is None

    def test_scalars_and_null_are_kept(self):
        data = sanitize_data({"chainId": 8453, "parentId": None, "type": "reply"})

        assert data == {"chainId": 8453, "parentId": None, "type": "reply"}

    def test_key_order_is_preserved(self):
        data = sanitize_data({"type": "reply", "chainId": 1, "commentId": "0x1"})

        assert list(data) == ["type", "chainId", "commentId"]

    def test_badge_must_be_numeric(self):
        assert sanitize(NotificationPayload(title="t", body="b", badge=True)).badge is None
        assert sanitize(NotificationPayload(title="t", body="b", badge="3")).badge is None
        assert sanitize(NotificationPayload(title="t", body="b", badge=3)).badge == 3

    def test_non_finite_badge_is_dropped(self):
        assert sanitize(NotificationPayload(title="t", body="b", badge=float("nan"))).badge is None
        assert sanitize(NotificationPayload(title="t", body="b", badge=float("inf"))).badge is None
        assert sanitize(NotificationPayload(title="t", body="b", badge=2.5)).badge == 2.5

    def test_sound_must_be_a_string(self):
        assert sanitize(NotificationPayload(title="t", body="b", sound=1)).sound is None
        assert sanitize(NotificationPayload(title="t", body="b", sound="ping")).sound == "ping"

    def test_missing_data_is_none(self):
        assert sanitize(NotificationPayload(title="t", body="b")).data is None

    def test_input_is_not_mutated(self):
        data = {"type": "reply", "secret": "x"}

        sanitize(NotificationPayload(title="t", body="b", data=data))

        assert data == {"type": "reply", "secret": "x"}
