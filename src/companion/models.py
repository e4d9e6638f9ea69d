"""Shared data models — the contract between parser, classifier, and store.

Parser produces TranscriptSummary objects. Classifier turns a HookEvent plus
a summary into a StatusRecord. Store persists StatusRecords as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Pet states understood by the display process
IDLE = "idle"
THINKING = "thinking"
WORKING = "working"
READING = "reading"
WAITING = "waiting"
DONE = "done"
ERROR = "error"

PET_STATES = (IDLE, THINKING, WORKING, READING, WAITING, DONE, ERROR)


@dataclass
class UsageFields:
    """Raw token counters from a transcript line's message.usage object."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    @property
    def context(self) -> int:
        return self.input_tokens + self.cache_creation_tokens + self.cache_read_tokens


@dataclass
class ContentBlock:
    """One entry of message.content. Only thinking blocks are ever surfaced."""

    type: str
    thinking: str | None = None
    text: str | None = None


@dataclass
class TranscriptLine:
    """A single parsed line of a transcript JSONL file."""

    request_id: str | None
    usage: UsageFields | None = None
    content_blocks: list[ContentBlock] = field(default_factory=list)

    def latest_thinking(self) -> str | None:
        """Text of the last non-empty thinking block on this line."""
        found = None
        for block in self.content_blocks:
            if block.type == "thinking" and block.thinking:
                found = block.thinking
        return found


@dataclass(frozen=True)
class TokenUsage:
    """Context-window occupancy and output size for the current request."""

    context: int  # input + cache_creation + cache_read
    output: int

    @property
    def is_empty(self) -> bool:
        return self.context == 0 and self.output == 0

    def to_dict(self) -> dict:
        return {"context": self.context, "output": self.output}


@dataclass(frozen=True)
class TranscriptSummary:
    """What the aggregator hands to the classifier."""

    usage: TokenUsage | None = None
    thinking: str | None = None


EMPTY_SUMMARY = TranscriptSummary()


@dataclass
class StatusRecord:
    """A status update, persisted to status.json for the display process."""

    status: str
    action: str
    timestamp: int  # epoch milliseconds
    usage: TokenUsage | None = None
    thinking: str | None = None

    def to_dict(self) -> dict:
        data: dict = {
            "status": self.status,
            "action": self.action,
            "timestamp": self.timestamp,
        }
        # usage is omitted entirely, never null
        if self.usage is not None and not self.usage.is_empty:
            data["usage"] = self.usage.to_dict()
        if self.thinking:
            data["thinking"] = self.thinking
        return data

    @classmethod
    def from_dict(cls, data: dict) -> StatusRecord:
        """Rebuild a record from status JSON.

        Raises ValueError or TypeError when a field has the wrong shape.
        """
        status = data.get("status", IDLE)
        if status not in PET_STATES:
            raise ValueError(f"Unknown status {status!r}")
        usage_data = data.get("usage")
        usage = None
        if isinstance(usage_data, dict):
            usage = TokenUsage(
                context=int(usage_data.get("context", 0) or 0),
                output=int(usage_data.get("output", 0) or 0),
            )
        return cls(
            status=status,
            action=str(data.get("action", "")),
            timestamp=int(data.get("timestamp", 0) or 0),
            usage=usage,
            thinking=data.get("thinking") or None,
        )


@dataclass
class HookEvent:
    """A hook event as delivered by the assistant runtime on stdin."""

    hook_event_name: str
    tool_name: str | None = None
    tool_input: dict = field(default_factory=dict)
    tool_response: dict = field(default_factory=dict)
    user_prompt: str | None = None
    transcript_path: str | None = None
    notification_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> HookEvent:
        """Build an event from raw hook JSON. Unknown keys are ignored."""
        tool_input = data.get("tool_input")
        tool_response = data.get("tool_response")
        transcript_path = data.get("transcript_path")
        return cls(
            hook_event_name=data.get("hook_event_name", ""),
            tool_name=data.get("tool_name"),
            tool_input=tool_input if isinstance(tool_input, dict) else {},
            tool_response=tool_response if isinstance(tool_response, dict) else {},
            user_prompt=data.get("user_prompt") or data.get("prompt"),
            transcript_path=transcript_path if isinstance(transcript_path, str) else None,
            notification_type=data.get("notification_type"),
        )
