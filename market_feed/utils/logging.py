"""
Run logging for the market_feed pipeline.

Records go to a rich console handler and, optionally, a per-run log file.
Every record carries the ``run_id`` of the pipeline run that emitted it and,
in the JSONL file format, a ``stage`` naming the pipeline step (the
``event`` passed to log_event, or the emitting module such as ``budget``).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig

LOGGER_NAME = "market_feed"


def setup_logging(
    cfg: LoggingConfig,
    run_output_dir: Path | None = None,
    run_id: str | None = None,
) -> logging.Logger:
    """Configure the package logger for one pipeline run.

    Handlers sit on the ``market_feed`` logger, so records from the budget,
    storage and parser modules end up in the same run log.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_string(cfg.level))
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.propagate = False
    run_filter = RunContextFilter(run_id or new_run_id())

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console_handler.setLevel(_level_from_string(cfg.level))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        console_handler.addFilter(run_filter)
        logger.addHandler(console_handler)

    if cfg.file and run_output_dir is not None:
        run_output_dir.mkdir(parents=True, exist_ok=True)
        file_path = run_output_dir / cfg.filename
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setLevel(_level_from_string(cfg.level))
        file_handler.setFormatter(_build_file_formatter(cfg.format))
        file_handler.addFilter(run_filter)
        logger.addHandler(file_handler)

    return logger


def new_run_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")


def log_event(
    logger: logging.Logger | None,
    message: str,
    *,
    event: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Log a pipeline step with its counters as structured extras."""
    if logger is None:
        return
    logger.log(level, message, extra={"event": event, **fields})


class RunContextFilter(logging.Filter):
    """Stamp each record with the run it belongs to."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "run_id"):
            record.run_id = self.run_id
        return True


class JsonlFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "run_id": getattr(record, "run_id", None),
            "stage": record_stage(record),
            "message": record.getMessage(),
        }
        payload.update(_extract_extras(record))
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def record_stage(record: logging.LogRecord) -> str:
    """Pipeline stage of a record: its event, else the emitting module."""
    event = getattr(record, "event", None)
    if event:
        return str(event)
    return record.name.rsplit(".", 1)[-1]


# LogRecord attributes plus the keys JsonlFormatter writes itself
_RESERVED = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "event",
        "run_id",
    }
)


def _extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED}


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s [%(run_id)s] %(message)s")


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
