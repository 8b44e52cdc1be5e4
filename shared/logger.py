"""Structured logging setup."""
import structlog
import logging
import sys

LOG_FORMATS = ("json", "console")

def setup_logging(level: str = "INFO", log_format: str = "json") -> structlog.BoundLogger:
    """Setup structured logging for the uploader.

    ``log_format`` is ``json`` for machine-readable lines or ``console`` for
    people at a terminal. Log lines go to stderr so that stdout stays free
    for results.
    """
    # Convert string level to logging level constant
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = level_map.get(level.upper(), logging.INFO)
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}; expected one of {', '.join(LOG_FORMATS)}")

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger()
