"""Event classifier — maps a hook event plus transcript summary to a StatusRecord."""

from __future__ import annotations

import logging
import time
from pathlib import PurePosixPath, PureWindowsPath

from companion.models import (
    DONE,
    ERROR,
    IDLE,
    READING,
    THINKING,
    WAITING,
    WORKING,
    HookEvent,
    StatusRecord,
    TranscriptSummary,
)
from companion.parser import LATEST, aggregate

logger = logging.getLogger(__name__)

GREP_PATTERN_MAX_LENGTH = 20

# Tool name -> human-readable action
TOOL_ACTIONS = {
    "Read": "Reading file...",
    "Write": "Writing file...",
    "Edit": "Editing code...",
    "Bash": "Running command...",
    "Glob": "Searching files...",
    "Grep": "Searching code...",
    "WebFetch": "Fetching web page...",
    "WebSearch": "Searching the web...",
    "Task": "Working on subtask...",
    "TodoWrite": "Planning tasks...",
    "AskUserQuestion": "Has a question for you...",
    "mcp__ide__getDiagnostics": "Checking diagnostics...",
    "mcp__ide__executeCode": "Executing code...",
}

# Tool name -> pet state
TOOL_STATES = {
    "Read": READING,
    "Glob": READING,
    "Grep": READING,
    "WebFetch": READING,
    "WebSearch": READING,
    "Write": WORKING,
    "Edit": WORKING,
    "Bash": WORKING,
    "Task": WORKING,
    "TodoWrite": WORKING,
    "AskUserQuestion": WAITING,
    "mcp__ide__getDiagnostics": READING,
    "mcp__ide__executeCode": WORKING,
}

_FILE_VERBS = {
    "Read": "Reading",
    "Write": "Writing",
    "Edit": "Editing",
}

# notification_type -> action; anything else (idle_prompt included) is ignored
NOTIFICATION_ACTIONS = {
    "permission_prompt": "Needs your permission...",
    "elicitation_dialog": "Has a question for you...",
}


def classify(
    event: HookEvent,
    summary: TranscriptSummary,
    now: int | None = None,
) -> StatusRecord | None:
    """Build the status record for one event, or None if the event is ignored.

    Args:
        event: The hook event.
        summary: Aggregated transcript data for the event's transcript.
        now: Classification time in epoch ms (defaults to the current time).
    """
    timestamp = now if now is not None else _now_ms()
    usage = summary.usage
    name = event.hook_event_name

    if name == "UserPromptSubmit":
        # The prompt itself is never shown
        return StatusRecord(THINKING, "Thinking...", timestamp, usage)

    if name == "PreToolUse":
        state, action = describe_tool(event.tool_name, event.tool_input)
        return StatusRecord(state, action, timestamp, usage)

    if name == "PostToolUse":
        if event.tool_response.get("success") is False:
            return StatusRecord(ERROR, "Something went wrong...", timestamp, usage)
        if summary.thinking:
            return StatusRecord(
                THINKING,
                f'Thinking: "{summary.thinking}"',
                timestamp,
                usage,
                thinking=summary.thinking,
            )
        return StatusRecord(THINKING, "Thinking...", timestamp, usage)

    if name == "Stop":
        return StatusRecord(DONE, "All done!", timestamp, usage)

    if name == "SessionStart":
        return StatusRecord(IDLE, "Session started!", timestamp)

    if name == "SessionEnd":
        return StatusRecord(IDLE, "Session ended", timestamp, usage)

    if name == "Notification":
        action = NOTIFICATION_ACTIONS.get(event.notification_type or "")
        if action is None:
            logger.debug("Ignoring notification type %r", event.notification_type)
            return None
        return StatusRecord(WAITING, action, timestamp, usage)

    logger.debug("Ignoring hook event %r", name)
    return None


def describe_tool(tool_name: str | None, tool_input: dict) -> tuple[str, str]:
    """Return (state, action) for a tool that is about to run."""
    state = TOOL_STATES.get(tool_name or "", WORKING)
    action = TOOL_ACTIONS.get(tool_name or "", f"Using {tool_name}...")

    file_path = tool_input.get("file_path")
    command = tool_input.get("command")
    pattern = tool_input.get("pattern")

    if tool_name in _FILE_VERBS and file_path and isinstance(file_path, str):
        action = f"{_FILE_VERBS[tool_name]} {_basename(file_path)}..."
    elif tool_name == "Bash" and command and isinstance(command, str):
        action = f"Running {command.split(' ')[0]}..."
    elif tool_name == "Grep" and pattern and isinstance(pattern, str):
        shown = pattern[:GREP_PATTERN_MAX_LENGTH]
        if len(pattern) > GREP_PATTERN_MAX_LENGTH:
            shown += "..."
        action = f'Searching for "{shown}"...'

    return state, action


def handle_event(
    event: HookEvent,
    mode: str = LATEST,
    now: int | None = None,
) -> StatusRecord | None:
    """Aggregate the event's transcript once, then classify the event."""
    summary = aggregate(event.transcript_path, mode=mode)
    return classify(event, summary, now=now)


def _basename(file_path: str) -> str:
    if "\\" in file_path and "/" not in file_path:
        return PureWindowsPath(file_path).name
    return PurePosixPath(file_path).name


def _now_ms() -> int:
    return int(time.time() * 1000)
