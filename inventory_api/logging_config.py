"""Log output setup for the inventory API.

Production logs are one JSON object per line: timestamp, level, logger,
message and the ID of the request being served, plus whichever request
fields the caller passed through ``extra`` (method, path, status_code,
duration_ms, client_ip, error_reason). ``LOG_FORMAT=text`` switches to a
plain line for local work.

Free text is scrubbed of secret-looking ``key=value`` / ``key: value`` pairs
before it is written.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

from inventory_api.middleware.request_id import current_request_id

_SECRET_ASSIGNMENT = re.compile(
    r"(password|passwordhash|salt|secret|api.?key|access.?token|refresh.?token|token|authorization)"
    r"[\s\"']*[=:]\s*\S+",
    flags=re.IGNORECASE,
)
REDACTED = "[REDACTED]"

# Request fields copied verbatim from the record when present
_CONTEXT_FIELDS = ("method", "path", "status_code", "duration_ms", "client_ip")

_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


def redact(text: str) -> str:
    return _SECRET_ASSIGNMENT.sub(REDACTED, text)


class RequestIdFilter(logging.Filter):
    """Stamps each record with the ID of the request being served, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = current_request_id()
        return True


class JsonFormatter(logging.Formatter):
    """Renders a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, object] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", None),
            "message": redact(record.getMessage()),
        }
        payload.update(
            (name, getattr(record, name)) for name in _CONTEXT_FIELDS if hasattr(record, name)
        )

        reason = getattr(record, "error_reason", None)
        if reason is not None:
            payload["error_reason"] = redact(str(reason))
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = redact(self.formatException(record.exc_info))

        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a single stderr handler on the root logger.

    Any handlers already on the root logger are replaced, so calling this
    again (for instance once per ``create_app``) never duplicates output.
    Unknown level names fall back to INFO.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(logging.getLevelName(level.upper()) if level.upper() in _LEVELS else logging.INFO)

    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(_TEXT_FORMAT) if fmt == "text" else JsonFormatter())
    root.addHandler(handler)

