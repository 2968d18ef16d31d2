# ecr_secret_operator/core/logging/context.py
"""
Logging context management.

Values bound with ``log_context`` are attached to every record logged inside
the block, including from tasks spawned within it.
"""

from collections.abc import Iterator
from contextlib import contextmanager
import contextvars
from typing import Any

_logging_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "logging_context", default={}
)


def get_logging_context() -> dict[str, Any]:
    """Get a copy of the values bound in the current context."""
    return dict(_logging_context.get())


@contextmanager
def log_context(**values: Any) -> Iterator[dict[str, Any]]:
    """Bind key/value pairs to log records emitted inside the block.

    Args:
        **values: Context values, e.g. namespace="default".
    """
    merged = {**_logging_context.get(), **values}
    token = _logging_context.set(merged)
    try:
        yield merged
    finally:
        _logging_context.reset(token)


class ContextFilter:
    """Logging filter that copies the bound context onto each record."""

    def filter(self, record: Any) -> bool:
        record.context = dict(_logging_context.get())
        return True
