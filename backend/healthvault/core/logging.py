"""
Application-wide logging configuration.

Console logging with a uniform format: timestamp | level | module | message.
Call ``configure_logging`` once when the application is created; every other
module just does ``logger = logging.getLogger(__name__)``.
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Args:
        level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger(__name__).debug("Logging initialized with level %s", level)
