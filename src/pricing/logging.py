"""Structured logging for the pricing service.

structlog renders both our own events and the stdlib records from uvicorn
and aiosqlite. Request fields bound by request_context() are merged into
every event logged while the request is handled.
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

# Loggers that would otherwise duplicate what HttpMetrics already records
QUIET_LOGGERS = ("uvicorn.access",)


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO") -> None:
    """Route structlog and stdlib logging through one root handler.

    LOG_FORMAT selects the renderer: "json" for deployments, anything else
    (default "console") for a human-readable dev stream. Unknown levels fall
    back to INFO.
    """
    log_format = os.environ.get("LOG_FORMAT", "console").strip().lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_format),
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def request_context(method: str, path: str) -> Iterator[None]:
    """Bind http_method and http_path for events logged inside the block."""
    with structlog.contextvars.bound_contextvars(http_method=method, http_path=path):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
