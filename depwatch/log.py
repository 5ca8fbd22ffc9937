"""Logging setup — loguru sink configured once per process."""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def setup_logging(debug: bool = False, sink=None) -> int:
    """
    Configure loguru for depwatch.

    Replaces the default handler with a single console sink.
    Debug mode lowers the level so per-file usage reports are shown.

    Args:
        debug: Emit DEBUG records (config ``debug: true``)
        sink: Output target (default: sys.stderr)

    Returns:
        The loguru handler id of the new sink
    """
    logger.remove()
    level = "DEBUG" if debug else "INFO"
    return logger.add(sink or sys.stderr, level=level, format=LOG_FORMAT)
