"""Fallback cooldown controller.

Decides, for each fallback event, whether the user gets an escalation
message. At most one message goes out per user per cooldown window. The
timestamp of the last escalation lives in the fallback store and is read
fresh for every decision; nothing is cached here.

The read and the conditional write are not a transaction. Two events for
the same user arriving together can both see an expired window and both
escalate; the last write wins. There is no lock.
"""

from typing import Optional

from fallback_webhook.config import settings
from fallback_webhook.escalation.business_hours import BusinessHoursEvaluator
from fallback_webhook.escalation.messages import select_escalation_message
from fallback_webhook.exceptions import FallbackError, UnknownError
from fallback_webhook.models.fallback import UNKNOWN_USER_ID, FallbackOutcome, UserFallbackRecord
from fallback_webhook.storage.base import FallbackStore
from fallback_webhook.utils.logging import get_logger, log_fallback_decision
from fallback_webhook.utils.timezone import Clock, civil_isoformat, system_clock, to_epoch_ms

logger = get_logger(__name__)

DEFAULT_COOLDOWN_MS = 18_000_000  # 5 hours


def normalize_user_id(user_id: Optional[str]) -> str:
    """Map absent or blank ids onto the shared ``unknown`` record."""
    if user_id is None:
        return UNKNOWN_USER_ID
    user_id = str(user_id).strip()
    return user_id or UNKNOWN_USER_ID


class FallbackCooldownController:
    """Rate-limits escalation messages per user."""

    def __init__(
        self,
        store: FallbackStore,
        clock: Optional[Clock] = None,
        business_hours: Optional[BusinessHoursEvaluator] = None,
        cooldown_ms: Optional[int] = None
    ):
        self.store = store
        self.clock = clock or system_clock
        self.business_hours = business_hours or BusinessHoursEvaluator()
        self.cooldown_ms = settings.FALLBACK_COOLDOWN_MS if cooldown_ms is None else cooldown_ms

        if self.cooldown_ms < 0:
            raise ValueError("Cooldown must not be negative")

    async def handle_fallback(self, user_id: Optional[str] = None) -> FallbackOutcome:
        """Escalate, suppress, or report failure for one fallback event."""
        user_id = normalize_user_id(user_id)
        logger.info("Processing fallback", user_id=user_id)

        try:
            return await self._decide(user_id)

        except FallbackError as e:
            logger.error(
                "Fallback decision failed",
                user_id=user_id,
                error_kind=e.kind,
                error=str(e)
            )
            return FallbackOutcome.failed(user_id, str(e), e.kind)

        except Exception as e:
            logger.error(
                "Unexpected error in fallback decision",
                user_id=user_id,
                error=str(e),
                exc_info=True
            )
            return FallbackOutcome.failed(user_id, str(e), UnknownError.kind)

    async def _decide(self, user_id: str) -> FallbackOutcome:
        record = await self.store.get(user_id)
        last_fallback_time = record.last_fallback_time if record else 0

        now = self.clock()
        now_ms = to_epoch_ms(now)
        elapsed = now_ms - last_fallback_time

        if elapsed < self.cooldown_ms:
            log_fallback_decision(
                logger, user_id, "suppressed", elapsed,
                remaining_ms=self.cooldown_ms - elapsed
            )
            return FallbackOutcome.suppressed(user_id)

        update = UserFallbackRecord(
            last_fallback_time=now_ms,
            last_updated=civil_isoformat(now, self.business_hours.tz_name),
            user_id=user_id,
        )
        await self.store.update(user_id, update.to_store())
        logger.info("Updated fallback time", user_id=user_id, last_fallback_time=now_ms)

        civil = self.business_hours.civil_time(now)
        within_hours = self.business_hours.is_open(now)
        logger.info(
            "Business hours check",
            local_time=civil.local.isoformat(),
            day=civil.day_of_week,
            hour=civil.hour,
            minute=civil.minute,
            within_business_hours=within_hours
        )

        log_fallback_decision(
            logger, user_id, "escalated", elapsed,
            within_business_hours=within_hours
        )
        return FallbackOutcome.escalated(
            user_id,
            select_escalation_message(within_hours),
            within_hours
        )
