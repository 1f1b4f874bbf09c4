# Common utilities and shared modules
"""
Shared components used by the post collection engine:
- Project configuration
- Logging configuration
"""

from .config import settings, PROJECT_ROOT, CONFIG_DIR, DATA_DIR
from .logging import setup_logging

__all__ = [
    "settings",
    "PROJECT_ROOT",
    "CONFIG_DIR",
    "DATA_DIR",
    "setup_logging",
]
