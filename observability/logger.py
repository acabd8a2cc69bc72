"""Structured event logging for mock interview sessions."""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any

from config.settings import settings

HUMAN_FORMAT = "[%(asctime)s] %(levelname)s %(name)s :: %(message)s"
SUMMARY_KEYS = ("operation", "status", "question_number", "turns", "attempt", "ms", "outcome", "error")

_logger = logging.getLogger("mock_interview.events")
_logger.propagate = False


def _ensure_handlers() -> None:
    if _logger.handlers:
        return
    level = settings.LOG_LEVEL.upper()
    _logger.setLevel(level)

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    console.addFilter(lambda record: not getattr(record, "is_json", False))
    _logger.addHandler(console)

    if not settings.ENABLE_FILE_LOGS:
        return

    log_dir = os.path.dirname(settings.LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    # One JSON document per line, file only
    events_file = logging.handlers.RotatingFileHandler(
        settings.LOG_FILE,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    events_file.setLevel(level)
    events_file.setFormatter(logging.Formatter("%(message)s"))
    events_file.addFilter(lambda record: getattr(record, "is_json", False))
    _logger.addHandler(events_file)


def summary_line(event: dict[str, Any]) -> str:
    head = f"session={event.get('session_id')} kind={event.get('kind')}"
    extras = [f"{key}={event[key]}" for key in SUMMARY_KEYS if key in event]
    return " ".join([head, *extras])


def _emit(message: str, level: int, *, is_json: bool) -> None:
    record = _logger.makeRecord(_logger.name, level, "", 0, message, (), None)
    record.is_json = is_json  # type: ignore[attr-defined]
    _logger.handle(record)


def log_event(kind: str, session_id: str, *, level: int = logging.INFO, **fields: Any) -> dict[str, Any]:
    """Emit a session event as a console summary and, when enabled, a JSON file line.

    The emitted payload is returned so callers and tests can inspect it.
    """

    _ensure_handlers()
    event: dict[str, Any] = {
        "ts": time.time(),
        "trace": uuid.uuid4().hex,
        "kind": kind,
        "session_id": session_id,
        **fields,
    }
    _emit(summary_line(event), level, is_json=False)
    if settings.ENABLE_FILE_LOGS:
        _emit(json.dumps(event, ensure_ascii=False, default=str), level, is_json=True)
    return event


__all__ = ["log_event", "summary_line"]
