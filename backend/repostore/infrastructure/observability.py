"""Repostore logging - one structured record per event, errors carry their code and ids.

Invariants:
    - Every record has time (from the record itself), level, logger and message
    - repo_id / user_id / owner_id / stage / error_code come from `extra=` when given
    - A RepostoreError attached via exc_info fills in any of those fields left unset
    - setup_logging owns exactly one root handler; calling it again replaces that handler

Design Decisions:
    - Called by the composition root (bootstrap.build_services), never at import time
    - Text format for local runs, JSON for anything shipped to a collector
"""

import json
import logging
from datetime import datetime, timezone

from repostore.core.errors import DatabaseError, RepostoreError

HANDLER_NAME = "repostore"
EXTRA_FIELDS = ("repo_id", "user_id", "owner_id", "stage", "error_code")
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(stage)s] - %(message)s"


def record_fields(record: logging.LogRecord) -> dict:
    """Collect the repostore fields of a record, falling back to its attached error."""
    fields = {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }

    exc = record.exc_info[1] if record.exc_info else None
    if isinstance(exc, RepostoreError):
        fields.setdefault("error_code", exc.code)
        for key in ("repo_id", "user_id", "owner_id"):
            value = getattr(exc.context, key)
            if value is not None:
                fields.setdefault(key, value)
        if isinstance(exc, DatabaseError):
            fields.setdefault("stage", exc.operation)
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(record_fields(record))
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines; the failing stage is shown when there is one."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        # Copy: other handlers see the record as logged
        labelled = logging.makeLogRecord(record.__dict__)
        labelled.stage = record_fields(record).get("stage", "-")
        return super().format(labelled)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the repostore root handler. Returns it."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
