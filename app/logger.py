# app/logger.py
import json
import logging
import sys
from datetime import datetime, timezone

from .config import Settings


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once: a single stdout handler,
    console or JSON formatted depending on settings.log_format.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(handler)


request_logger = logging.getLogger("app.requests")


async def log_requests(request, call_next):
    request_logger.info("%s %s - %s", request.method, request.url, datetime.now(timezone.utc).isoformat())
    return await call_next(request)
