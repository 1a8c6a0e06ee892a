"""Fallback escalation decision components."""

from .business_hours import BusinessHoursEvaluator, is_within_business_hours
from .cooldown import DEFAULT_COOLDOWN_MS, FallbackCooldownController, normalize_user_id

__all__ = [
    "BusinessHoursEvaluator",
    "is_within_business_hours",
    "DEFAULT_COOLDOWN_MS",
    "FallbackCooldownController",
    "normalize_user_id",
]
