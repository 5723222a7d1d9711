"""Utility modules for huellas.

Provides:
- logger: get_logger and enable_debug_logging
"""

from huellas.utils.logger import enable_debug_logging, get_logger

__all__ = [
    "enable_debug_logging",
    "get_logger",
]
