"""Configuration and logging setup."""

from dishscout.config.settings import Settings, get_settings
from dishscout.config.logging import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
]
