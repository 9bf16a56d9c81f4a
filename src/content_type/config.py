"""
Configuration module for the content-type utilities.

The classifier itself has no configuration surface. The settings loaded here
only drive the ambient logging set-up, read from environment variables in a
single `Settings` container so they are defined in one place.
"""

import logging
import os
from typing import Literal


class Settings:
    """
    A container for all configuration settings, loaded from environment variables.

    Optional settings get default values; invalid values raise ``ValueError``.
    """

    # --- Logging Configuration ---
    LOG_LEVEL: str
    LOG_FORMAT: Literal["console", "json"]

    def __init__(self):
        """
        Loads settings from environment variables and performs validation.
        """
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        if self.LOG_LEVEL not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{self.LOG_LEVEL}' is not a valid log level")

        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "console").strip().lower()
        if self.LOG_FORMAT not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")
