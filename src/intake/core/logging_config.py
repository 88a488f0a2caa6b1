"""
Logging Configuration

Modules log through logging.getLogger(__name__); this only sets up the
root handler once per process.
"""

import logging

from intake.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    logging.getLogger("intake").setLevel(settings.log_level.upper())
