"""structlog setup for the command line."""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """Send structured logs to stderr so reports on stdout stay parseable.

    Args:
        debug: Emit DEBUG events (the `-d` flag); otherwise WARNING and above
    """
    level = logging.DEBUG if debug else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
