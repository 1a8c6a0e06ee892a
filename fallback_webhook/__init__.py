"""Dialogflow fulfillment webhook with rate-limited fallback escalation."""

__version__ = "0.1.0"
