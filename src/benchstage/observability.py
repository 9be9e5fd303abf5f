"""Structured logging and OpenTelemetry spans for benchstage.

Log events are snake_case names (``stage_started``, ``storage_put_retry``)
with the dataset, size and table bound as keys. Spans carry the same keys
as attributes so traces and logs can be joined.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer
    from structlog.stdlib import BoundLogger

_logger: BoundLogger | None = None
_tracer: Tracer | None = None

TRACER_NAME = "benchstage"


def get_logger() -> BoundLogger:
    """Return the shared benchstage logger."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(TRACER_NAME)
    return _logger


def get_tracer() -> Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Route benchstage events through stdlib logging on stderr.

    The logger is not cached on first use, so a later call (another CLI
    invocation in the same process, a test) takes effect immediately.

    Args:
        log_level: Minimum level name, e.g. ``DEBUG`` or ``WARNING``.
        json_format: One JSON object per line; otherwise the console renderer.
        add_timestamp: Prefix events with an ISO timestamp.
    """
    processors: list[Any] = []
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", level=logging.getLevelName(log_level.upper()))


@contextmanager
def span(
    name: str,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
    log_start: bool = True,
    log_end: bool = True,
) -> Iterator[Span]:
    """Trace a block and log ``{name}_started``, ``_completed`` or ``_failed``.

    Attributes are set on the span and bound to every log event. Exceptions
    are recorded on the span and re-raised.

    Example:
        >>> with span("delete", attributes={"dataset": "imdb", "size": "1mb"}):
        ...     storage.delete(key)
    """
    logger = get_logger()
    attrs = attributes or {}

    with get_tracer().start_as_current_span(name, kind=kind, attributes=attrs) as s:
        if log_start:
            logger.debug(f"{name}_started", **attrs)
        try:
            yield s
        except Exception as exc:
            s.set_status(Status(StatusCode.ERROR, str(exc)))
            s.record_exception(exc)
            logger.error(f"{name}_failed", error=str(exc), **attrs)
            raise
        s.set_status(Status(StatusCode.OK))
        if log_end:
            logger.info(f"{name}_completed", **attrs)


@contextmanager
def staging_operation(
    operation: str,
    *,
    dataset: str,
    size: str,
    table: str | None = None,
    log_end: bool = True,
) -> Iterator[Span]:
    """Span for one pipeline operation on a (dataset, size) pair.

    Example:
        >>> with staging_operation("status", dataset="imdb", size="1mb", log_end=False):
        ...     storage.list("imdb/1mb/")
    """
    attrs: dict[str, Any] = {"dataset": dataset, "size": size}
    if table:
        attrs["table"] = table
    with span(operation, attributes=attrs, log_end=log_end) as s:
        yield s


def log_write_retry(key: str, *, attempt: int, max_attempts: int, wait_seconds: float, error: str) -> None:
    """Log a storage write that failed and is about to be retried."""
    get_logger().warning(
        "storage_put_retry",
        key=key,
        attempt=attempt,
        max_attempts=max_attempts,
        wait_seconds=wait_seconds,
        error=error,
    )
