"""
Logging setup for the estimate service.

The engine attaches its figures to records as ``extra`` fields
(``warning_count``, ``warning_codes``, ``section_count``, ``subtotal``,
``tax``). The JSON formatter lifts them into the emitted object so a log
shipper can filter on them; the plain formatter leaves them out.
"""
import json
import logging
import sys

ENGINE_FIELDS = ("warning_count", "warning_codes", "section_count", "subtotal", "tax")

QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")

TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Record -> one JSON line, engine extras included when present."""

    def format(self, record):
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in ENGINE_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Install a single stdout handler on the root logger. Safe to call twice."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
