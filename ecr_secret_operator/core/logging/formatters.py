# ecr_secret_operator/core/logging/formatters.py
"""
Log formatters for structured logging.

This module provides the text and JSON formatters selected by ``log_format``.
"""

from datetime import UTC, datetime
import json
import logging

from .context import get_logging_context

# Attributes every LogRecord carries; anything else was passed via ``extra``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
    | {"message", "asctime", "context", "taskName"}
)


def _record_context(record: logging.LogRecord) -> dict:
    context = getattr(record, "context", None)
    if context is None:
        context = get_logging_context()
    extras = {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }
    return {**context, **extras}


class StructuredFormatter(logging.Formatter):
    """Structured formatter for consistent log output."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        include_context: bool = True,
    ):
        """Initialize the structured formatter.

        Args:
            fmt: Log format string.
            datefmt: Date format string.
            include_context: Whether to append bound context values.
        """
        if fmt is None:
            fmt = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"

        super().__init__(fmt, datefmt)
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record.

        Args:
            record: Log record to format.

        Returns:
            Formatted log message.
        """
        message = super().format(record)

        if not self.include_context:
            return message

        context = _record_context(record)
        if context:
            context_str = " | ".join(f"{key}={value}" for key, value in context.items())
            return f"{message} | {context_str}"

        return message


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, include_context: bool = True, include_exception: bool = True):
        """Initialize the JSON formatter.

        Args:
            include_context: Whether to include bound context values.
            include_exception: Whether to include exception information.
        """
        super().__init__()
        self.include_context = include_context
        self.include_exception = include_exception

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON formatted log message.
        """
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if self.include_exception and record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_context:
            for key, value in _record_context(record).items():
                if key not in log_data and value is not None:
                    log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)
