"""Utility modules for djotpress.

Provides:
- logger: get_logger for logging
"""

from djotpress.utils.logger import get_logger

__all__ = ["get_logger"]
