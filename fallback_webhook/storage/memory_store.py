"""Process-local fallback store for development and tests."""

import asyncio
import copy
from typing import Any, Dict, Mapping, Optional

from fallback_webhook.models.fallback import UserFallbackRecord
from fallback_webhook.storage.base import FallbackStore
from fallback_webhook.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryFallbackStore(FallbackStore):
    """Dict-backed store with the same merge semantics as the database."""

    backend_name = "memory"

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self.records: Dict[str, Dict[str, Any]] = copy.deepcopy(initial or {})
        self._lock = asyncio.Lock()
        self.read_count = 0
        self.write_count = 0

    async def get(self, key: str) -> Optional[UserFallbackRecord]:
        async with self._lock:
            self.read_count += 1
            raw = copy.deepcopy(self.records.get(key))
        return self.parse_record(key, raw)

    async def update(self, key: str, fields: Mapping[str, Any]) -> None:
        async with self._lock:
            self.write_count += 1
            record = self.records.setdefault(key, {})
            record.update(dict(fields))
        logger.debug("Record updated", key=key, fields=sorted(fields))

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Deep copy of everything stored."""
        return copy.deepcopy(self.records)
