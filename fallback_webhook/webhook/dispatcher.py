"""Intent dispatcher for Dialogflow fulfillment requests."""

from typing import Awaitable, Callable, Dict, Optional

from fallback_webhook.escalation.cooldown import FallbackCooldownController
from fallback_webhook.escalation.messages import APOLOGY_MESSAGE, SUPPRESSED_MESSAGE
from fallback_webhook.exceptions import UnhandledIntentError
from fallback_webhook.models.dialogflow import WebhookRequest, WebhookResponse
from fallback_webhook.models.fallback import FallbackOutcome
from fallback_webhook.utils.logging import get_logger

logger = get_logger(__name__)

IntentHandler = Callable[[WebhookRequest], Awaitable[str]]


def outcome_text(outcome: FallbackOutcome) -> str:
    """Text shown to the user for a cooldown decision."""
    if outcome.is_escalated:
        return outcome.message or ""
    if outcome.is_suppressed:
        return SUPPRESSED_MESSAGE
    return APOLOGY_MESSAGE


def make_fallback_handler(controller: FallbackCooldownController) -> IntentHandler:
    """Wrap the cooldown controller as a fallback intent handler."""

    async def handle_fallback(request: WebhookRequest) -> str:
        outcome = await controller.handle_fallback(request.user_id)

        if outcome.is_failed:
            logger.error(
                "Error in fallback handler",
                user_id=outcome.user_id,
                error_kind=outcome.error_kind,
                reason=outcome.reason
            )
        elif outcome.is_suppressed:
            logger.info("User is in cooldown period", user_id=outcome.user_id)

        return outcome_text(outcome)

    return handle_fallback


class IntentDispatcher:
    """Routes webhook requests to handlers by intent display name."""

    def __init__(self, handlers: Optional[Dict[str, IntentHandler]] = None):
        self.handlers: Dict[str, IntentHandler] = dict(handlers or {})

    def register(self, intent_name: str, handler: IntentHandler) -> None:
        self.handlers[intent_name] = handler

    async def dispatch(self, request: WebhookRequest) -> WebhookResponse:
        intent_name = request.intent_name
        handler = self.handlers.get(intent_name)

        if handler is None:
            raise UnhandledIntentError(intent_name)

        logger.info(
            "Dispatching intent",
            intent=intent_name,
            session=request.session,
            response_id=request.response_id
        )
        text = await handler(request)

        return WebhookResponse.from_text(text, request.query_result.output_contexts)
