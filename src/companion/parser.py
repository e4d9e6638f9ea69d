"""Transcript parser — reads a Claude Code transcript into a TranscriptSummary.

A transcript is an append-only JSONL file that the assistant keeps writing
while we read it, so the last line may be torn. Every line is parsed on its
own and bad lines are skipped; the scan itself never fails.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from companion.models import (
    EMPTY_SUMMARY,
    ContentBlock,
    TokenUsage,
    TranscriptLine,
    TranscriptSummary,
    UsageFields,
)

logger = logging.getLogger(__name__)

LATEST = "latest"
CUMULATIVE = "cumulative"
AGGREGATION_MODES = (LATEST, CUMULATIVE)

THINKING_MAX_LENGTH = 40

# message.usage key -> UsageFields attribute
_USAGE_KEYS = {
    "input_tokens": "input_tokens",
    "output_tokens": "output_tokens",
    "cache_creation_input_tokens": "cache_creation_tokens",
    "cache_read_input_tokens": "cache_read_tokens",
}


@dataclass(frozen=True)
class LineOutcome:
    """Result of parsing one line: either a TranscriptLine or a reason."""

    line: TranscriptLine | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.line is not None


@dataclass(frozen=True)
class ReadOutcome:
    """Result of reading a transcript file."""

    status: str  # ok, missing, io_error
    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class ScanResult:
    summary: TranscriptSummary
    lines_seen: int = 0
    lines_skipped: int = 0


def parse_line(raw: str) -> LineOutcome:
    """Parse a single JSONL line into a TranscriptLine."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        return LineOutcome(error=f"invalid JSON: {exc.msg}")

    if not isinstance(data, dict):
        return LineOutcome(error="line is not a JSON object")

    request_id = data.get("requestId") or None
    if request_id is not None and not isinstance(request_id, str):
        return LineOutcome(error="requestId is not a string")

    message = data.get("message")
    if message is None:
        return LineOutcome(line=TranscriptLine(request_id=request_id))
    if not isinstance(message, dict):
        return LineOutcome(error="message is not an object")

    usage = None
    usage_data = message.get("usage")
    if usage_data is not None:
        if not isinstance(usage_data, dict):
            return LineOutcome(error="message.usage is not an object")
        counts = {}
        for key, attr in _USAGE_KEYS.items():
            value = usage_data.get(key)
            if value is None:
                value = 0
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                return LineOutcome(error=f"usage.{key} is not a non-negative integer")
            counts[attr] = value
        usage = UsageFields(**counts)

    blocks: list[ContentBlock] = []
    content = message.get("content")
    # String content (plain user messages) carries no blocks
    if isinstance(content, list):
        for item in content:
            if not isinstance(item, dict):
                continue
            block_type = item.get("type")
            if not isinstance(block_type, str):
                continue
            thinking = item.get("thinking")
            text = item.get("text")
            blocks.append(
                ContentBlock(
                    type=block_type,
                    thinking=thinking if isinstance(thinking, str) else None,
                    text=text if isinstance(text, str) else None,
                )
            )

    return LineOutcome(
        line=TranscriptLine(request_id=request_id, usage=usage, content_blocks=blocks)
    )


def read_transcript(path: str | Path | None) -> ReadOutcome:
    """Read the whole transcript as text in a single read."""
    if not path:
        return ReadOutcome(status="missing")
    try:
        file_path = Path(path).expanduser()
        with open(file_path, encoding="utf-8", errors="replace") as f:
            text = f.read()
    except FileNotFoundError:
        return ReadOutcome(status="missing")
    except (OSError, ValueError, TypeError, RuntimeError) as exc:
        # RuntimeError: expanduser() with no resolvable home directory
        return ReadOutcome(status="io_error", error=str(exc))
    return ReadOutcome(status="ok", text=text)


def scan_lines(lines: Iterable[str], mode: str = LATEST) -> ScanResult:
    """Fold transcript lines (oldest first) into a summary.

    In latest mode every usage-bearing line overwrites the one before it, so
    the last line in file order wins. In cumulative mode usage is kept per
    requestId (last chunk wins) and summed; lines without a requestId each
    count once.
    """
    _check_mode(mode)

    usage_by_key: dict[object, UsageFields] = {}
    usage_request_id: str | None = None
    thinking: str | None = None
    thinking_request_id: str | None = None
    seen = 0
    skipped = 0

    for index, raw in enumerate(lines):
        raw = raw.strip()
        if not raw:
            continue
        seen += 1
        outcome = parse_line(raw)
        if not outcome.ok:
            skipped += 1
            logger.debug("Skipping transcript line %d: %s", index + 1, outcome.error)
            continue
        line = outcome.line

        if line.usage is not None:
            if mode == LATEST:
                key: object = LATEST
            else:
                key = line.request_id if line.request_id is not None else ("line", index)
            usage_by_key[key] = line.usage
            usage_request_id = line.request_id

        # PRIVACY: only thinking blocks, never text blocks
        line_thinking = line.latest_thinking()
        if line_thinking:
            thinking = line_thinking
            thinking_request_id = line.request_id

    context = sum(u.context for u in usage_by_key.values())
    output = sum(u.output_tokens for u in usage_by_key.values())

    usage = None
    if not (context == 0 and output == 0):
        usage = TokenUsage(context=context, output=output)

    # Thinking from an earlier request is stale
    thinking_result = None
    if thinking and thinking_request_id == usage_request_id:
        thinking_result = truncate_text(thinking)

    return ScanResult(
        summary=TranscriptSummary(usage=usage, thinking=thinking_result),
        lines_seen=seen,
        lines_skipped=skipped,
    )


def aggregate(path: str | Path | None, mode: str = LATEST) -> TranscriptSummary:
    """Scan a transcript and return its usage and latest thinking.

    Never raises for data problems: a missing, unreadable or garbled
    transcript yields an empty summary.
    """
    _check_mode(mode)

    read = read_transcript(path)
    if read.status == "missing":
        logger.debug("No transcript at %s", path)
        return EMPTY_SUMMARY
    if not read.ok:
        logger.warning("Could not read transcript %s: %s", path, read.error)
        return EMPTY_SUMMARY

    result = scan_lines(read.text.split("\n"), mode=mode)
    if result.lines_skipped:
        logger.debug(
            "Skipped %d of %d lines in %s", result.lines_skipped, result.lines_seen, path,
        )
    return result.summary


def truncate_text(text: str, max_length: int = THINKING_MAX_LENGTH) -> str:
    """Shorten text to max_length, preferring a word boundary, plus '...'."""
    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space >= max_length * 0.6:
        return truncated[:last_space] + "..."
    return truncated + "..."


def _check_mode(mode: str) -> None:
    if mode not in AGGREGATION_MODES:
        raise ValueError(
            f"Unknown aggregation mode {mode!r}; expected one of {', '.join(AGGREGATION_MODES)}"
        )
