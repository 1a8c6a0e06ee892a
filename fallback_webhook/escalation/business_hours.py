"""Business hours evaluation in the configured civil time zone."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fallback_webhook.config import settings
from fallback_webhook.utils.timezone import civil_now


@dataclass(frozen=True)
class CivilTime:
    """Local wall-clock reading used for the business hours check."""
    local: datetime
    day_of_week: int  # 0 = Sunday .. 6 = Saturday
    hour: int
    minute: int

    @property
    def fractional_hour(self) -> float:
        return self.hour + self.minute / 60


class BusinessHoursEvaluator:
    """Decides whether an instant falls inside the service desk's hours.

    Every day of the week uses the same ``[start, end)`` window, Sunday
    included. Operating hours published to customers differ per day, but
    the quick reply only goes out inside this shared window.
    """

    def __init__(
        self,
        tz_name: Optional[str] = None,
        start_hour: Optional[float] = None,
        end_hour: Optional[float] = None
    ):
        self.tz_name = tz_name or settings.BUSINESS_TIMEZONE
        self.start_hour = settings.BUSINESS_HOURS_START if start_hour is None else start_hour
        self.end_hour = settings.BUSINESS_HOURS_END if end_hour is None else end_hour

        if self.start_hour >= self.end_hour:
            raise ValueError("Business hours must start before they end")

    def civil_time(self, now: datetime) -> CivilTime:
        local = civil_now(now, self.tz_name)
        return CivilTime(
            local=local,
            day_of_week=(local.weekday() + 1) % 7,
            hour=local.hour,
            minute=local.minute,
        )

    def is_open(self, now: datetime) -> bool:
        h = self.civil_time(now).fractional_hour
        return self.start_hour <= h < self.end_hour


def is_within_business_hours(
    now: datetime,
    evaluator: Optional[BusinessHoursEvaluator] = None
) -> bool:
    """True iff ``now`` is inside business hours in the civil zone."""
    return (evaluator or BusinessHoursEvaluator()).is_open(now)
