"""Display helpers for token counts and status lines."""

from __future__ import annotations

from companion.models import StatusRecord, TokenUsage


def format_tokens(count: int) -> str:
    """Compact token count: 1234 -> '1.2k', 1234567 -> '1.2M'."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}k"
    return str(count)


def format_usage(usage: TokenUsage | None) -> str:
    if usage is None:
        return "no usage"
    return f"ctx {format_tokens(usage.context)} / out {format_tokens(usage.output)}"


def describe_status(record: StatusRecord) -> str:
    """One-line summary, e.g. '[reading] Reading app.py...  (ctx 12.3k / out 450)'."""
    line = f"[{record.status}] {record.action}"
    if record.usage is not None and not record.usage.is_empty:
        line += f"  ({format_usage(record.usage)})"
    return line
