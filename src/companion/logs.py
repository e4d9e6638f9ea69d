"""Logging setup for the companion logger tree."""

from __future__ import annotations

import logging

from companion.config import CompanionConfig

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def configure_logging(config: CompanionConfig) -> logging.Logger:
    """Attach one handler to the 'companion' logger.

    Hooks talk to the assistant over stdout, so logs go to a file or stderr.
    Calling this again replaces the previous handler.
    """
    logger = logging.getLogger("companion")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(config.log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()  # stderr

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.log_level, logging.WARNING))
    return logger
