"""
Utility helpers used by the converter.

This subpackage exposes the exceptions and JSON Lines run log helpers,
plus logging setup for the entry points.
"""

from .errors import ERRORS, ConfigError, ConverterError, HtmlLoadError, PolicyError, report_error, report_ok
from .logging_config import setup_logging

__all__ = [
    "ERRORS",
    "ConfigError",
    "ConverterError",
    "HtmlLoadError",
    "PolicyError",
    "report_error",
    "report_ok",
    "setup_logging",
]
