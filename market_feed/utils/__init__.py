"""
Shared utility functions.

This package contains utility code used across the pipeline and CLI.
"""

from .logging import LOGGER_NAME, JsonlFormatter, log_event, record_stage, setup_logging

__all__ = [
    "LOGGER_NAME",
    "setup_logging",
    "log_event",
    "record_stage",
    "JsonlFormatter",
]
