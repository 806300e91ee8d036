import logging
import sys

import structlog


LOG_LEVELS = ["debug", "info", "warning", "error"]
PACKAGE_LOGGER = "unhasher"


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Structured logger backed by the stdlib logger `name`. Nothing is rendered
    until a handler is attached, so library calls stay silent by default.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(level: str = "warning", json_output: bool = False) -> None:
    """Configure logging for command line use. Logs go to stderr, results to stdout."""
    renderer = (
        structlog.processors.JSONRenderer(indent=2)
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    ))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(level.upper())
    package_logger.propagate = False
