"""Data models for the Dialogflow fallback webhook."""

from .dialogflow import WebhookRequest, WebhookResponse
from .fallback import UNKNOWN_USER_ID, FallbackOutcome, FallbackStatus, UserFallbackRecord

__all__ = [
    "WebhookRequest",
    "WebhookResponse",
    "UNKNOWN_USER_ID",
    "FallbackOutcome",
    "FallbackStatus",
    "UserFallbackRecord",
]
