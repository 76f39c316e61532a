import logging
import json
import os
import uuid
import datetime
from typing import Any, Optional
from threading import local

# Thread-local storage for context (request_id of the current import)
_context = local()

DEFAULT_LOG_FILE = os.path.join("logs", "dirham.log")


class JSONFormatter(logging.Formatter):
    """
    Formatter that renders every record as one JSON object per line.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "request_id": getattr(_context, "request_id", "GLOBAL"),
        }

        # Structured fields passed as keyword arguments to the adapter
        if hasattr(record, "extra_fields") and isinstance(record.extra_fields, dict):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def _resolve_level(level: Optional[int | str]) -> int:
    if level is None:
        level = os.getenv("DIRHAM_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    level = str(level).strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    return numeric if isinstance(numeric, int) else logging.INFO


def setup_logging(log_level: Optional[int | str] = None, log_file: Optional[str] = DEFAULT_LOG_FILE):
    """
    Configure the ``dirham`` logger tree. Called once by entry points (CLI, API);
    library modules only call ``get_logger``.
    """
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

    pkg_logger = logging.getLogger("dirham")
    pkg_logger.setLevel(_resolve_level(log_level))

    if pkg_logger.handlers:
        pkg_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(JSONFormatter())
    pkg_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(JSONFormatter())
        pkg_logger.addHandler(file_handler)

    pkg_logger.propagate = False
    pkg_logger.info("Logging infrastructure initialized.", extra={"extra_fields": {"status": "ready"}})


def set_request_id(request_id: str):
    """Set the current request ID in context."""
    _context.request_id = request_id


def get_request_id() -> str:
    """Get the current request ID from context, creating one if missing."""
    if not hasattr(_context, "request_id"):
        _context.request_id = str(uuid.uuid4())
    return _context.request_id


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    Adapter that turns arbitrary keyword arguments into structured fields:

        logger.info("line skipped", reason="AmountOutOfRange", line_number=12)
    """
    STANDARD_ARGS = {'exc_info', 'stack_info', 'stacklevel', 'extra'}

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        fields = dict(extra.get("extra_fields") or {})

        new_kwargs = {}
        for key, value in kwargs.items():
            if key in self.STANDARD_ARGS:
                new_kwargs[key] = value
            else:
                fields[key] = value

        extra["extra_fields"] = fields
        new_kwargs["extra"] = extra
        return msg, new_kwargs


def get_logger(name: str) -> StructuredLoggerAdapter:
    """
    Return a structured logger for the given name.
    """
    pkg_logger = logging.getLogger("dirham")
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return StructuredLoggerAdapter(logging.getLogger(name), {})
