"""Status file storage — writes StatusRecords where the display process reads them."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path

from companion.models import IDLE, StatusRecord

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "Waiting for Claude Code..."


def default_status() -> StatusRecord:
    """The record shown before any hook has reported."""
    return StatusRecord(IDLE, DEFAULT_ACTION, int(time.time() * 1000))


def write_status(record: StatusRecord, status_file: Path) -> None:
    """Write a record as JSON, replacing the status file atomically."""
    status_file = Path(status_file)
    status_file.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(record.to_dict(), indent=2)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{status_file.name}.", suffix=".tmp", dir=status_file.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, status_file)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote status %s to %s", record.status, status_file)


def read_status(status_file: Path) -> StatusRecord:
    """Load the current status; the default record if there is none yet."""
    status_file = Path(status_file)
    try:
        with open(status_file, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return default_status()
    except (OSError, ValueError) as exc:
        logger.warning("Could not read status file %s: %s", status_file, exc)
        return default_status()

    if not isinstance(data, dict):
        logger.warning("Status file %s does not hold a JSON object", status_file)
        return default_status()
    try:
        return StatusRecord.from_dict(data)
    except (TypeError, ValueError) as exc:
        logger.warning("Malformed status in %s: %s", status_file, exc)
        return default_status()
