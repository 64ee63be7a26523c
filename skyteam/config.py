"""
Runtime configuration.

Values come from the environment (a local .env file is read first) and can
be overridden on the command line by the entry points.
"""

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(env=None):
    """Read SKYTEAM_* settings. Pass env to bypass os.environ and .env."""
    if env is None:
        load_dotenv()
        env = os.environ

    log_level = env.get("SKYTEAM_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"SKYTEAM_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    return Settings(log_level=log_level)


def configure_logging(level=DEFAULT_LOG_LEVEL):
    """Send all log records to stdout. Call once at startup."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)
