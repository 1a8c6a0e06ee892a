"""Utility modules for the Dialogflow fallback webhook."""

from .logging import get_logger, setup_logging
from .timezone import civil_isoformat, civil_now, display_civil_time, system_clock

__all__ = [
    "get_logger",
    "setup_logging",
    "civil_isoformat",
    "civil_now",
    "display_civil_time",
    "system_clock",
]
