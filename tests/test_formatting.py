"""Tests for companion.formatting module."""

from companion.formatting import describe_status, format_tokens, format_usage
from companion.models import StatusRecord, TokenUsage


def test_format_tokens_small():
    assert format_tokens(0) == "0"
    assert format_tokens(999) == "999"


def test_format_tokens_thousands():
    assert format_tokens(1_000) == "1.0k"
    assert format_tokens(1_234) == "1.2k"
    assert format_tokens(999_999) == "1000.0k"


def test_format_tokens_millions():
    assert format_tokens(1_234_567) == "1.2M"
    assert format_tokens(2_000_000) == "2.0M"


def test_format_usage():
    assert format_usage(TokenUsage(context=12_300, output=450)) == "ctx 12.3k / out 450"
    assert format_usage(None) == "no usage"


def test_describe_status_with_usage():
    record = StatusRecord("reading", "Reading app.py...", 0, TokenUsage(12_300, 450))
    assert describe_status(record) == "[reading] Reading app.py...  (ctx 12.3k / out 450)"


def test_describe_status_without_usage():
    record = StatusRecord("idle", "Session started!", 0)
    assert describe_status(record) == "[idle] Session started!"
