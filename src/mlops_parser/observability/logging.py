"""Structured logging for mlops_parser.

Every module creates its logger at import time, long before the CLI (or an
embedding host) calls setup_logging(). get_logger() therefore hands out a
thin EventLogger over a stdlib logger:

    logger.info("model.registered", name="mnist", version=1)

The keyword fields ride on the LogRecord as ``event_fields``. Whichever
formatter setup_logging() installs renders them:

    MLOPS_PARSER_LOG_FORMATTER=structlog   structlog ProcessorFormatter (default)
    MLOPS_PARSER_LOG_FORMATTER=stdlib      JSON lines / plain text, no structlog

and the handler sends the output to stderr (default) or appends it to a JSONL
file (MLOPS_PARSER_LOG_DESTINATION=jsonl, MLOPS_PARSER_LOG_PATH).

Plain logging.getLogger() records from core modules go through the same
handler, so they come out in the same shape.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from mlops_parser.observability.config import ObservabilityConfig

FIELDS_ATTR = "event_fields"
_MANAGED_ATTR = "_mlops_parser_managed"
_DEFAULT_JSONL_PATH = "/tmp/mlops-parser.jsonl"


def _fields_of(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, FIELDS_ATTR, None) or {}


# ---------------------------------------------------------------------------
# Event logger
# ---------------------------------------------------------------------------


class EventLogger:
    """Stdlib logger with a structlog-like ``event, **fields`` call style."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, event: str, fields: dict[str, Any]) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, event, extra={FIELDS_ATTR: fields})

    def debug(self, event: str, **fields: Any) -> None:
        self._log(logging.DEBUG, event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._log(logging.INFO, event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._log(logging.WARNING, event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._log(logging.ERROR, event, fields)


def get_logger(name: str = "") -> EventLogger:
    """Get an event logger. Safe to call at import time."""
    return EventLogger(logging.getLogger(name))


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def _lift_event_fields(_logger: Any, _name: str, event_dict: dict) -> dict:
    """structlog processor: copy EventLogger fields off the LogRecord."""
    record = event_dict.get("_record")
    if record is not None:
        for key, value in _fields_of(record).items():
            event_dict.setdefault(key, value)
    return event_dict


def _structlog_formatter(log_format: str) -> logging.Formatter:
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _lift_event_fields,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record, event fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        line.update(_fields_of(record))
        if record.exc_info and record.exc_info[1]:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


class _TextFormatter(logging.Formatter):
    """Human-readable line: ``<time> <level> <logger>: <event> key=value ...``."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        fields = " ".join(f"{k}={v}" for k, v in _fields_of(record).items())
        return f"{text} {fields}" if fields else text


def _stdlib_formatter(log_format: str) -> logging.Formatter:
    if log_format == "console":
        return _TextFormatter()
    return _JsonLineFormatter()


_FORMATTERS: dict[str, Callable[[str], logging.Formatter]] = {
    "structlog": _structlog_formatter,
    "stdlib": _stdlib_formatter,
}


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------


def _stderr_handler(config: ObservabilityConfig) -> logging.Handler:
    return logging.StreamHandler(sys.stderr)


def _jsonl_handler(config: ObservabilityConfig) -> logging.Handler:
    path = Path(config.jsonl_path or _DEFAULT_JSONL_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(str(path), mode="a", encoding="utf-8")


_DESTINATIONS: dict[str, Callable[[ObservabilityConfig], logging.Handler]] = {
    "stderr": _stderr_handler,
    "jsonl": _jsonl_handler,
}


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def setup_logging(config: ObservabilityConfig | None = None) -> None:
    """Attach one formatted handler to the root logger.

    Calling it again replaces the handler installed by the previous call and
    leaves every other root handler (pytest's caplog, a host's own) alone.
    """
    if config is None:
        from mlops_parser.observability.config import ObservabilityConfig

        config = ObservabilityConfig()

    make_formatter = _FORMATTERS.get(config.log_formatter)
    if make_formatter is None:
        raise ValueError(
            f"Unknown log formatter: {config.log_formatter!r}. Available: {list(_FORMATTERS)}."
        )
    make_handler = _DESTINATIONS.get(config.log_destination)
    if make_handler is None:
        raise ValueError(
            f"Unknown log destination: {config.log_destination!r}. "
            f"Available: {list(_DESTINATIONS)}."
        )

    handler = make_handler(config)
    handler.setFormatter(make_formatter(config.log_format))
    setattr(handler, _MANAGED_ATTR, True)

    shutdown_logging()
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))


def shutdown_logging() -> None:
    """Detach and close the handler installed by setup_logging()."""
    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, _MANAGED_ATTR, False):
            root.removeHandler(h)
            h.close()
