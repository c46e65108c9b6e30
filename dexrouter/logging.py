"""structlog setup for the router service."""

import logging

import structlog

from dexrouter.config import RouterConfig


def configure_logging(config: RouterConfig) -> None:
    """Configure structlog processors from the router config.

    Modules log through `structlog.get_logger()`; this only decides level and
    rendering, so library users who configure structlog themselves can skip it.
    """
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    renderer: structlog.types.Processor
    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
