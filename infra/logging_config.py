"""Centralized logging configuration.

Text logs for terminals, JSON logs for collectors. ``setup_logging`` leaves
pre-configured root handlers alone unless asked to override them.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from infra.config import get_settings

# Context attached to every JSON log entry of the current lifecycle call
lifecycle_ctx: ContextVar[dict[str, Any] | None] = ContextVar("lifecycle_ctx", default=None)

_STANDARD_RECORD_ATTRS = frozenset(
    {
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module",
        "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
        "relativeCreated", "thread", "threadName", "processName", "process", "taskName",
    }
)


def set_lifecycle_context(**kwargs: Any) -> None:
    """Add values that will be included in all subsequent JSON log entries."""
    current = dict(lifecycle_ctx.get() or {})
    current.update(kwargs)
    lifecycle_ctx.set(current)


def clear_lifecycle_context() -> None:
    lifecycle_ctx.set({})


def get_lifecycle_context() -> dict[str, Any]:
    """Get a copy of the current lifecycle context."""
    ctx = lifecycle_ctx.get()
    return dict(ctx) if ctx else {}


def _utc_iso8601() -> str:
    # Example: 2026-01-24T18:03:12.123Z
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with exception text and lifecycle context."""

    def __init__(self, *, extra_fields: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._extra_fields = dict(extra_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "timestamp": _utc_iso8601(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        # keys passed via `extra={...}` never overwrite core fields
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS:
                base.setdefault(key, value)
        for key, value in self._extra_fields.items():
            base.setdefault(key, value)
        for key, value in get_lifecycle_context().items():
            base.setdefault(key, value)
        if record.exc_info:
            base["exception"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-friendly logs with UTC timestamps."""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__("%(asctime)sZ | %(levelname)s | %(name)s | %(message)s")


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    json_logs: bool = False
    override_root_handlers: bool = False
    extra_fields: Mapping[str, Any] | None = None


def setup_logging(
    *,
    level: str | None = None,
    json_logs: bool | None = None,
    override_root_handlers: bool | None = None,
    extra_fields: Mapping[str, Any] | None = None,
) -> None:
    """
    Central logging setup for the CLI.

    Env vars:
      - ZBXACT_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default INFO)
      - ZBXACT_LOG_JSON:  1/0 (default 0)
      - ZBXACT_LOG_OVERRIDE: 1/0 (default 0)
         If 1, replaces any pre-configured root handlers.
         If 0, only configures logging if root has no handlers.

    Logs go to stderr so that stdout stays reserved for command output.
    """
    config = get_settings(reload=True).logging

    cfg = LoggingConfig(
        level=(level or config.level).upper(),
        json_logs=json_logs if json_logs is not None else bool(config.json_logs),
        override_root_handlers=override_root_handlers
        if override_root_handlers is not None
        else bool(config.override_root_handlers),
        extra_fields=extra_fields,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, cfg.level, logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if cfg.json_logs:
        handler.setFormatter(JsonFormatter(extra_fields=cfg.extra_fields))
    else:
        handler.setFormatter(TextFormatter())

    if cfg.override_root_handlers:
        for existing in list(root.handlers):
            root.removeHandler(existing)
        root.addHandler(handler)
    elif not root.handlers:
        root.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
