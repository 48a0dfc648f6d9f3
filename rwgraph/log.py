from __future__ import annotations

# Logging for rwgraph: stdlib `logging` behind one named logger with a compact
# console format. Library modules only log; the CLIs decide the level.

import logging
import sys

LOGGER_NAME = "rwgraph"


class RWGraphFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"[{record.levelname}] {record.name}: {record.getMessage()}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it (`rwgraph.<name>`)."""

    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(*, verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Attach a single stderr handler; `debug` overrides `verbose`."""

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(RWGraphFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
