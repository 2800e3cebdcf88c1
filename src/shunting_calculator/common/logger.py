"""Project-wide logger configuration."""
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(processName)s: %(message)s"
LOG_LEVEL_ENV = "SHUNTING_CALCULATOR_LOG_LEVEL"


def get_logger(name: str = "shunting_calculator") -> logging.Logger:
    """
    Return the named logger, attaching a stderr handler on first use.

    The level is read from the ``SHUNTING_CALCULATOR_LOG_LEVEL`` environment variable
    and defaults to WARNING, which is also used when the variable holds an unknown level.

    :param str name: Logger name

    :return: Configured logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        try:
            log.setLevel(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
        except ValueError:
            log.setLevel(logging.WARNING)
            log.warning(f"Unknown log level in {LOG_LEVEL_ENV}, using WARNING")
        log.propagate = False
    return log


logger: logging.Logger = get_logger()
