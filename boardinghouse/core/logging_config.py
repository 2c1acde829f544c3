"""JSON line logging for the API process and scripts.

Call sites log a dotted event name as the message and repeat it as
``extra={"event": ...}`` together with any ids worth searching on; every extra
attribute ends up as a top-level key of the emitted JSON object.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from boardinghouse.core.config import get_config

_STANDARD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Chatty third-party loggers kept at WARNING outside debug runs.
_QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, value)
            for name, value in vars(record).items()
            if name not in _STANDARD_FIELDS and not name.startswith("_")
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging() -> None:
    """Attach JSON handlers to the root logger unless it already has some."""
    root = logging.getLogger()
    if root.handlers:
        return

    config = get_config()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.LOG_FILE:
        handlers.append(logging.FileHandler(config.LOG_FILE, encoding="utf-8"))

    formatter = JsonFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(config.LOG_LEVEL)

    if not config.DEBUG:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
