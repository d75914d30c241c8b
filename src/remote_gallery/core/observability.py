"""Correlated logging for archive and bulk operations."""

import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Optional

from .logging_config import setup_logger


def _new_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class LogContext:
    """Correlation id, operation name and key/value details of one call."""

    correlation_id: str = field(default_factory=_new_correlation_id)
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        return replace(self, operation=operation, metadata=dict(self.metadata))

    def with_metadata(self, **kwargs) -> "LogContext":
        return replace(self, metadata={**self.metadata, **kwargs})

    def prefix(self) -> str:
        """``[operation] [correlation id]`` as rendered in front of messages."""
        if self.operation:
            return f"[{self.operation}] [{self.correlation_id}]"
        return f"[{self.correlation_id}]"


def render_message(message: str, context: Optional[LogContext] = None, **kwargs) -> str:
    """Render a log line from a message, an optional context and extra fields."""
    details = {**(context.metadata if context else {}), **kwargs}
    text = f"{context.prefix()} {message}" if context else message
    if details:
        text = f"{text} ({', '.join(f'{k}={v}' for k, v in details.items())})"
    return text


class StructuredLogger:
    """
    ``LoggerProtocol`` implementation on top of a configured stdlib logger.

    Messages carry the context prefix and the context metadata, e.g.
    ``[assemble_folder] [3f2a9c1b0d4e] Archive written (images=4, count=4)``.
    """

    def __init__(
        self,
        name: str,
        level: Optional[str] = None,
        log_file: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger or setup_logger(name, level=level, log_file=log_file)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._logger.debug(render_message(message, context, **kwargs))

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._logger.info(render_message(message, context, **kwargs))

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._logger.warning(render_message(message, context, **kwargs))

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs):
        self._logger.error(render_message(message, context, **kwargs))


@contextmanager
def logged_operation(
    operation: str,
    logger: Any,
    component: str = "",
    **metadata,
) -> Iterator[LogContext]:
    """
    Log the start and the end of an operation and time it.

    Yields the operation's ``LogContext`` so nested log calls share its
    correlation id. A failure is logged with its message and re-raised.
    """
    context = LogContext(operation=operation, component=component).with_metadata(**metadata)
    start_time = time.perf_counter()
    logger.info(f"Starting {operation}", context)
    try:
        yield context
    except Exception as e:
        logger.error(
            f"Failed {operation}: {e}",
            context,
            elapsed_ms=round((time.perf_counter() - start_time) * 1000),
        )
        raise
    logger.info(
        f"Completed {operation}",
        context,
        elapsed_ms=round((time.perf_counter() - start_time) * 1000),
    )
