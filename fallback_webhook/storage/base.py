"""Key-value store contract for user fallback records."""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from fallback_webhook.exceptions import StoreReadError
from fallback_webhook.models.fallback import UserFallbackRecord


class FallbackStore(ABC):
    """Store with atomic per-key read and partial update.

    Implementations raise ``StoreReadError`` from ``get`` and
    ``StoreWriteError`` from ``update``. ``update`` merges the given fields
    into the existing record and creates the record when it is absent.
    """

    backend_name = "abstract"

    @abstractmethod
    async def get(self, key: str) -> Optional[UserFallbackRecord]:
        """Return the record stored under ``key``, or None."""

    @abstractmethod
    async def update(self, key: str, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into the record stored under ``key``."""

    @staticmethod
    def parse_record(key: str, raw: Any) -> Optional[UserFallbackRecord]:
        """Validate a raw store value into a record."""
        if raw is None:
            return None

        if not isinstance(raw, dict):
            raise StoreReadError(
                f"Record for {key!r} is {type(raw).__name__}, expected an object"
            )

        try:
            return UserFallbackRecord.model_validate(raw)
        except ValidationError as e:
            raise StoreReadError(f"Malformed record for {key!r}: {e}") from e

