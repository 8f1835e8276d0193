"""structlog setup shared by the reader and the CLI."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Optional, cast

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from qvd import __version__


def _pre_chain() -> list[Processor]:
    # Applied to structlog events and to records from plain stdlib loggers
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_logging(
    level: str | int = "INFO",
    json_output: bool = True,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Route structlog through the stdlib root logger.

    Args:
        level: Level name (case-insensitive) or numeric level
        json_output: One JSON object per line; otherwise the console renderer
        stream: Destination, stderr by default so stdout stays free for command output
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Invalid log level: {level}")
        level = numeric

    pre_chain = _pre_chain()
    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)


def get_logger(name: str) -> BoundLogger:
    """Logger tagged with the package name and version."""
    # Lazy proxy, so module-level loggers follow a later configure_logging()
    return cast(BoundLogger, structlog.get_logger(name, package="qvd", version=__version__))


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind key/values to every event logged inside the block, then restore."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = ["configure_logging", "get_logger", "log_context"]
