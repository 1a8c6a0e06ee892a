"""Fallback cooldown records and decision outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, validator

UNKNOWN_USER_ID = "unknown"


class UserFallbackRecord(BaseModel):
    """Per-user escalation state as stored under ``users/<userId>``."""

    last_fallback_time: int = Field(default=0, alias="lastFallbackTime", ge=0)
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")
    user_id: Optional[str] = Field(default=None, alias="userId")

    @validator("last_fallback_time", pre=True)
    def default_missing_time(cls, v: Any) -> Any:
        """Null timestamps mean the user was never escalated."""
        if v is None:
            return 0
        if isinstance(v, bool):
            raise ValueError("lastFallbackTime must be an integer")
        return v

    def to_store(self) -> Dict[str, Any]:
        """Serialize using the store's camelCase field names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    class Config:
        populate_by_name = True
        extra = "ignore"


class FallbackStatus(str, Enum):
    """Fallback decision enumeration."""

    ESCALATED = "escalated"
    SUPPRESSED = "suppressed"
    FAILED = "failed"


@dataclass(frozen=True)
class FallbackOutcome:
    """Result of one cooldown decision."""
    status: FallbackStatus
    user_id: str
    message: Optional[str] = None
    reason: Optional[str] = None
    error_kind: Optional[str] = None
    within_business_hours: Optional[bool] = None

    @classmethod
    def escalated(cls, user_id: str, message: str, within_business_hours: bool) -> "FallbackOutcome":
        return cls(
            status=FallbackStatus.ESCALATED,
            user_id=user_id,
            message=message,
            within_business_hours=within_business_hours,
        )

    @classmethod
    def suppressed(cls, user_id: str) -> "FallbackOutcome":
        return cls(status=FallbackStatus.SUPPRESSED, user_id=user_id)

    @classmethod
    def failed(cls, user_id: str, reason: str, error_kind: str = "unknown") -> "FallbackOutcome":
        return cls(
            status=FallbackStatus.FAILED,
            user_id=user_id,
            reason=reason,
            error_kind=error_kind,
        )

    @property
    def is_escalated(self) -> bool:
        return self.status == FallbackStatus.ESCALATED

    @property
    def is_suppressed(self) -> bool:
        return self.status == FallbackStatus.SUPPRESSED

    @property
    def is_failed(self) -> bool:
        return self.status == FallbackStatus.FAILED
