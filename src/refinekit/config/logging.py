"""structlog configuration for refinekit.

refinekit modules log through stdlib ``logging`` under the ``refinekit``
namespace and never configure handlers on import. Applications either call
:func:`configure_logging` for a ready-made stream handler, or attach
:func:`build_formatter` to handlers they already own.

Two output modes:
- Human (default): console-rendered lines, colored when the stream is a TTY
- JSON (log_json=True): one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from refinekit.config.settings import RefinekitSettings, get_settings

LIBRARY_LOGGER = "refinekit"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def build_formatter(
    *, log_json: bool = False, colors: bool = False
) -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering stdlib and structlog records alike."""
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    *,
    verbose: bool | None = None,
    log_json: bool | None = None,
    stream: TextIO | None = None,
    settings: RefinekitSettings | None = None,
) -> None:
    """Route structlog and stdlib logging to a single stream handler.

    Replaces any handlers on the root logger, so repeated calls never stack
    output. Explicit flags win over *settings* (default: :func:`get_settings`).

    Args:
        verbose: DEBUG output for the ``refinekit`` logger. When False, only WARNING+.
        log_json: Use the JSON renderer instead of the console renderer.
        stream: Destination, stderr by default.
        settings: Source of defaults for ``verbose`` and ``log_json``.
    """
    settings = settings or get_settings()
    if verbose is None:
        verbose = settings.verbose
    if log_json is None:
        log_json = settings.log_json
    stream = stream or sys.stderr

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(build_formatter(log_json=log_json, colors=stream.isatty()))

    # Third-party loggers stay at WARNING; only the library namespace opens up.
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LIBRARY_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
