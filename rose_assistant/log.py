import json
import logging
import time
from typing import Any

from . import settings


ROOT_LOGGER = "rose_assistant"


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger under the package root, attaching the stream handler once."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one structured log line as JSON."""
    record = {"ts": int(time.time() * 1000), "event": event}
    record.update(fields)
    try:
        logger.log(level, json.dumps(record, ensure_ascii=False, default=str))
    except (TypeError, ValueError):
        logger.log(level, "%s %r", event, fields)
