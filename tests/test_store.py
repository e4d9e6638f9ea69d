"""Tests for the status file store."""

from __future__ import annotations

import json

from companion.models import StatusRecord, TokenUsage
from companion.store import DEFAULT_ACTION, read_status, write_status


class TestWriteStatus:
    def test_creates_directory_and_file(self, status_file):
        record = StatusRecord("reading", "Reading app.py...", 1000, TokenUsage(500, 20))
        write_status(record, status_file)

        assert status_file.exists()
        data = json.loads(status_file.read_text())
        assert data == {
            "status": "reading",
            "action": "Reading app.py...",
            "timestamp": 1000,
            "usage": {"context": 500, "output": 20},
        }

    def test_usage_omitted_not_null(self, status_file):
        write_status(StatusRecord("idle", "Session started!", 1000), status_file)
        data = json.loads(status_file.read_text())
        assert "usage" not in data
        assert "thinking" not in data

    def test_zero_usage_omitted(self, status_file):
        write_status(StatusRecord("done", "All done!", 1000, TokenUsage(0, 0)), status_file)
        assert "usage" not in json.loads(status_file.read_text())

    def test_thinking_included_when_present(self, status_file):
        record = StatusRecord("thinking", 'Thinking: "hm"', 1000, thinking="hm")
        write_status(record, status_file)
        assert json.loads(status_file.read_text())["thinking"] == "hm"

    def test_pretty_printed(self, status_file):
        write_status(StatusRecord("done", "All done!", 1000), status_file)
        assert '"status": "done"' in status_file.read_text()

    def test_overwrites_previous(self, status_file):
        write_status(StatusRecord("thinking", "Thinking...", 1000), status_file)
        write_status(StatusRecord("done", "All done!", 2000), status_file)
        assert json.loads(status_file.read_text())["status"] == "done"

    def test_no_temp_files_left(self, status_file):
        write_status(StatusRecord("done", "All done!", 1000), status_file)
        assert [p.name for p in status_file.parent.iterdir()] == ["status.json"]


class TestReadStatus:
    def test_round_trip(self, status_file):
        record = StatusRecord("working", "Running pytest...", 1234, TokenUsage(9000, 120))
        write_status(record, status_file)
        assert read_status(status_file) == record

    def test_missing_file_is_default(self, status_file):
        record = read_status(status_file)
        assert record.status == "idle"
        assert record.action == DEFAULT_ACTION
        assert record.timestamp > 0
        assert record.usage is None

    def test_corrupt_file_is_default(self, status_file):
        status_file.parent.mkdir(parents=True)
        status_file.write_text("{not json")
        assert read_status(status_file).action == DEFAULT_ACTION

    def test_non_object_is_default(self, status_file):
        status_file.parent.mkdir(parents=True)
        status_file.write_text("[1, 2]")
        assert read_status(status_file).action == DEFAULT_ACTION

    def test_non_numeric_timestamp_is_default(self, status_file):
        status_file.parent.mkdir(parents=True)
        status_file.write_text('{"status": "idle", "action": "x", "timestamp": "soon"}')
        assert read_status(status_file).action == DEFAULT_ACTION

    def test_non_numeric_usage_is_default(self, status_file):
        status_file.parent.mkdir(parents=True)
        status_file.write_text(
            '{"status": "done", "action": "x", "timestamp": 1, "usage": {"context": [1]}}'
        )
        assert read_status(status_file).action == DEFAULT_ACTION

    def test_unknown_status_is_default(self, status_file):
        status_file.parent.mkdir(parents=True)
        status_file.write_text('{"status": "dancing", "action": "x", "timestamp": 1}')
        record = read_status(status_file)
        assert record.status == "idle"
        assert record.action == DEFAULT_ACTION
