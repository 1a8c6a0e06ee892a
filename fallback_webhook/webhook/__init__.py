"""Dialogflow webhook dispatching."""

from .dispatcher import IntentDispatcher, make_fallback_handler, outcome_text

__all__ = [
    "IntentDispatcher",
    "make_fallback_handler",
    "outcome_text",
]
