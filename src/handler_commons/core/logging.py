"""
Structured logging for resource handlers.

Two layers:

- **structlog setup:** ``configure_logging`` / ``get_logger`` give every module
  a structured logger with timestamp, level, logger name and service metadata.
- **RequestLogger:** the single-operation logging capability handed to
  handler utilities. It renders a message plus arguments through a redacting
  printer and passes exactly one string to a sink.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │ RequestLogger.log("Resource drift detected", {...})          │
        │      │                                                        │
        │      ├── printer.print({"request": ..., **args})  (redacted) │
        │      ▼                                                        │
        │ sink.log("Resource drift detected {json}")                    │
        │      │                                                        │
        │      ▼  StructlogSink (default)  or any object with log(str)  │
        │ structlog → JSON / console renderer                           │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> from handler_commons.core.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", json_format=True, service="db-instance-handler")
    >>> logger = get_logger(__name__)
    >>> logger.info("handler_invoked", action="CREATE")

Tags:
    logging, structlog, observability, redaction, handler-commons
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from handler_commons.core.printer import FilteredJsonPrinter, JsonPrinter

if TYPE_CHECKING:
    from handler_commons.core.settings import HandlerSettings


# Store service name for metadata
_SERVICE_NAME = "resource-handler"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "resource-handler",
) -> None:
    """Configure structured logging for the handler process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def configure_logging_from_settings(settings: HandlerSettings) -> None:
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service=settings.service_name,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context (request id, logical resource id, ...) to subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


# =============================================================================
# LOGGING CAPABILITY
# =============================================================================


class LogSink(Protocol):
    def log(self, message: str) -> None: ...


class StructlogSink:
    """LogSink that forwards rendered lines to a structlog logger."""

    def __init__(self, name: str = "handler_commons.request"):
        self._logger = get_logger(name)

    def log(self, message: str) -> None:
        self._logger.info(message)


class RequestLogger:
    """
    Logging capability bound to one handler request.

    ``request`` holds the identifiers of the request being served (stack,
    logical resource id, action); it is rendered with every line.
    """

    def __init__(
        self,
        sink: LogSink | None = None,
        printer: JsonPrinter | None = None,
        request: Mapping[str, Any] | None = None,
    ):
        self.sink: LogSink = sink if sink is not None else StructlogSink()
        self.printer: JsonPrinter = printer if printer is not None else FilteredJsonPrinter()
        self.request: dict[str, Any] = dict(request or {})

    def render(self, message: str, args: Mapping[str, Any] | None = None) -> str:
        payload: dict[str, Any] = {}
        if self.request:
            payload["request"] = self.request
        if args:
            payload.update(args)
        if not payload:
            return message
        return f"{message} {self.printer.print(payload)}"

    def log(self, message: str, args: Mapping[str, Any] | None = None) -> None:
        self.sink.log(self.render(message, args))

    def log_exception(self, message: str, error: BaseException) -> None:
        self.log(message, {"exception": error})


__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "LogSink",
    "StructlogSink",
    "RequestLogger",
]
