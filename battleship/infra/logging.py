"""Logging pipeline setup."""

from __future__ import annotations

import logging
import os
import queue
from dataclasses import dataclass
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

import orjson

from battleship.infra.app_data import resolve_logs_dir
from battleship.infra.config import resolve_log_level_name

__all__ = [
    "JsonFormatter",
    "LoggingConfig",
    "build_logging_config",
    "configure_logging",
    "setup_logging",
    "shutdown_logging",
]

_QUEUE_LISTENER: QueueListener | None = None

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_STANDARD_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"asctime", "message", "taskName"}


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging pipeline configuration."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json


class JsonFormatter(logging.Formatter):
    """JSON formatter with extra-field preservation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_RECORD_FIELDS}
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(config: LoggingConfig) -> None:
    """Install root handlers; with a file sink, records go through a background queue."""
    global _QUEUE_LISTENER

    shutdown_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level_name.upper(), logging.INFO))

    sinks = [_handler(logging.StreamHandler(), config.console_format)]
    if config.file_path:
        file_path = Path(config.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        sinks.append(_handler(logging.FileHandler(file_path, encoding="utf-8", delay=True), config.file_format))

    if len(sinks) == 1:
        root.addHandler(sinks[0])
        return
    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    root.addHandler(QueueHandler(log_queue))
    _QUEUE_LISTENER = QueueListener(log_queue, *sinks, respect_handler_level=True)
    _QUEUE_LISTENER.start()


def shutdown_logging() -> None:
    """Drain the file queue and detach every root handler."""
    global _QUEUE_LISTENER

    if _QUEUE_LISTENER is not None:
        _QUEUE_LISTENER.stop()
        for handler in _QUEUE_LISTENER.handlers:
            handler.close()
        _QUEUE_LISTENER = None
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


def build_logging_config() -> LoggingConfig:
    """Resolve logging configuration from env vars."""
    return LoggingConfig(
        level_name=resolve_log_level_name(default="INFO"),
        console_format=os.getenv("LOG_FORMAT", "text").strip().lower() or "text",
        file_path=_resolve_run_log_file_path(),
        file_format="json",
    )


def setup_logging() -> None:
    """Configure application logging from env vars."""
    config = build_logging_config()
    configure_logging(config)
    logging.getLogger(__name__).info("logging_file=%s", config.file_path)


def _resolve_run_log_file_path() -> str:
    configured = os.getenv("BATTLESHIP_LOG_DIR", "").strip()
    base_dir = Path(configured) if configured else resolve_logs_dir()
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    return str(base_dir / f"battleship_run_{stamp}.jsonl")


def _handler(handler: logging.Handler, kind: str) -> logging.Handler:
    if kind.strip().lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    return handler
