"""Logging setup for the scaffolder.

Two output formats, both on stderr so stdout stays free for command output:
- `json`: one object per record, `extra=` fields nested under "extra"
- `rich`: coloured console lines for interactive runs
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, Literal

from rich.console import Console
from rich.logging import RichHandler

LogFormat = Literal["json", "rich"]

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_ATTRS: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
}

_QUIET_LOGGERS: dict[str, int] = {
    "github": logging.INFO,
    "urllib3": logging.WARNING,
}


def record_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields attached to `record` through `extra=`."""

    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = record_extra(record)
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Paths and enums show up in `extra`; render them as strings.
        return json.dumps(payload, ensure_ascii=False, default=str)


class _ExtraRichHandler(RichHandler):
    """RichHandler that appends `extra=` fields as key=value pairs."""

    def render_message(self, record: logging.LogRecord, message: str) -> Any:
        extra = record_extra(record)
        if extra:
            message = f"{message} " + " ".join(f"{k}={v}" for k, v in extra.items())
        return super().render_message(record, message)


def _build_handler(fmt: LogFormat) -> logging.Handler:
    if fmt == "rich":
        return _ExtraRichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
    if fmt != "json":
        raise ValueError(f"Unknown log format: {fmt!r}")

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())
    return handler


def configure_logging(level: str, fmt: LogFormat = "json") -> None:
    """Install a single root handler; calling it again replaces the previous one."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.addHandler(_build_handler(fmt))
    root.setLevel(level.upper())

    for name, floor in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(root.level, floor))
