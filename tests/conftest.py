"""Shared test fixtures for companion tests."""

import json
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def session_jsonl():
    """Two streamed requests (req-1, req-2), each with thinking and text blocks."""
    return FIXTURES_DIR / "session.jsonl"


@pytest.fixture
def stale_thinking_jsonl():
    """Thinking only in req-1; the latest usage belongs to req-2."""
    return FIXTURES_DIR / "stale_thinking.jsonl"


@pytest.fixture
def torn_jsonl():
    """Valid lines mixed with garbage, blank lines and a torn trailing line."""
    return FIXTURES_DIR / "torn.jsonl"


@pytest.fixture
def write_transcript(tmp_path):
    """Write a list of dicts (or raw strings) as a JSONL transcript."""

    def _write(entries, name="transcript.jsonl"):
        path = tmp_path / name
        lines = [e if isinstance(e, str) else json.dumps(e) for e in entries]
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write


@pytest.fixture
def status_file(tmp_path):
    """Path to a status file inside a not-yet-created directory."""
    return tmp_path / "companion" / "status.json"
