"""structlog setup shared by the library and the example scripts."""

import logging
from typing import Optional

import structlog


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure structlog on top of the stdlib logging backend.

    Args:
        level: Log level name, defaults to settings.log_level
        fmt: "json" or "plain", defaults to settings.log_format
    """
    if level is None or fmt is None:
        from ..config import settings

        level = level or settings.log_level
        fmt = fmt or settings.log_format

    if fmt not in ("json", "plain"):
        raise ValueError(f"Unknown log format {fmt!r}, expected 'json' or 'plain'")

    logging.basicConfig(format="%(message)s", level=level.upper(), force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
