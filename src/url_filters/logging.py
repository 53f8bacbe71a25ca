"""structlog setup for filter passes and the CLI.

Log events are snake_case names with key/value context. Inside
``request_context`` every event also carries the listing's URL options.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal

import structlog

LogFormat = Literal["console", "json"]


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO


def _renderer(format: LogFormat) -> structlog.typing.Processor:
    if format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(level: str = "INFO", format: LogFormat = "console") -> None:
    """Send filtered, rendered events to stderr.

    Args:
        level: Level name; unknown names mean INFO
        format: "console" for people, "json" for log shippers
    """
    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if format == "json":
        processors.append(structlog.processors.dict_tracebacks)
    processors.append(_renderer(format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@contextmanager
def request_context(**values: Any) -> Iterator[None]:
    """Bind ``values`` to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(**values):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger, tagged with ``logger_name`` when given.

    The logger stays lazy, so module-level loggers pick up whatever
    ``configure_logging`` set last.
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()
