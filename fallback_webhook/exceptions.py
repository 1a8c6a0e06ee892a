"""Exception types raised by the fallback webhook."""


class FallbackError(Exception):
    """Base class for fallback webhook errors."""

    kind = "unknown"


class StoreReadError(FallbackError):
    """Reading a user fallback record failed or returned malformed data."""

    kind = "store_read"


class StoreWriteError(FallbackError):
    """Updating a user fallback record failed."""

    kind = "store_write"


class UnknownError(FallbackError):
    """Unexpected failure while deciding on a fallback escalation."""

    kind = "unknown"


class ConfigurationError(FallbackError):
    """Required settings are missing or invalid at startup."""

    kind = "configuration"


class UnhandledIntentError(FallbackError):
    """No handler is registered for the intent in a webhook request."""

    kind = "unhandled_intent"

    def __init__(self, intent_name: str):
        super().__init__(f"No handler for requested intent: {intent_name!r}")
        self.intent_name = intent_name
