"""
Logging setup for the glucose ledger CLI.

Log records go to stderr and optionally to a file; command results are
echoed on stdout. The HTTP client underneath the Supabase store logs every
request at INFO, so its loggers are held at WARNING unless DEBUG is asked for.
"""

import logging
import sys
from pathlib import Path

from glucose_ledger.utils.exceptions import ConfigurationError
from glucose_ledger.utils.parameters import LoggingConfig

HTTP_CLIENT_LOGGERS = ("httpx", "httpcore", "hpack")


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(config: LoggingConfig, logger_name: str | None = None) -> logging.Logger:
    """
    Attach console and file handlers to the application logger.

    Calling it again replaces the handlers, so repeated CLI invocations in
    one process do not duplicate output.

    Args:
        config: Logging configuration.
        logger_name: Logger to configure, normally "glucose_ledger".

    Returns:
        The configured logger.

    Raises:
        ConfigurationError: If the level name is unknown.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown logging level: {config.level}")

    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = []

    if config.console:
        handlers.append(_handler(logging.StreamHandler(sys.stderr), level, formatter))

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_handler(logging.FileHandler(log_file, encoding="utf-8"), level, formatter))

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)

    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
