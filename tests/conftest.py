"""Pytest configuration and fixtures."""

from datetime import datetime
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fallback_webhook.exceptions import StoreReadError, StoreWriteError
from fallback_webhook.main import create_app
from fallback_webhook.models.fallback import UserFallbackRecord
from fallback_webhook.storage.memory_store import InMemoryFallbackStore

BANGKOK = ZoneInfo("Asia/Bangkok")

# Sunday 2024-03-10 14:30 in Bangkok
SUNDAY_AFTERNOON = datetime(2024, 3, 10, 14, 30, tzinfo=BANGKOK)
SUNDAY_EVENING = datetime(2024, 3, 10, 20, 0, tzinfo=BANGKOK)


class FixedClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    @property
    def now_ms(self) -> int:
        return int(self.now.timestamp() * 1000)


class FlakyStore(InMemoryFallbackStore):
    """In-memory store that can be told to fail reads or writes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_reads = False
        self.fail_writes = False
        self.crash_reads = False

    async def get(self, key: str) -> Optional[UserFallbackRecord]:
        if self.fail_reads:
            raise StoreReadError("simulated read failure")
        if self.crash_reads:
            raise RuntimeError("simulated crash")
        return await super().get(key)

    async def update(self, key: str, fields: Mapping[str, Any]) -> None:
        if self.fail_writes:
            self.write_count += 1
            raise StoreWriteError("simulated write failure")
        await super().update(key, fields)


@pytest.fixture
def clock():
    """Clock fixed at Sunday 14:30 Bangkok time."""
    return FixedClock(SUNDAY_AFTERNOON)


@pytest.fixture
def store():
    """Empty flaky in-memory store."""
    return FlakyStore()


@pytest_asyncio.fixture
async def client(store, clock):
    """Create a test HTTP client around the in-memory store."""
    app = create_app(store=store, clock=clock)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sample_webhook_payload():
    """Dialogflow ES request for the fallback intent from a LINE user."""
    return {
        "responseId": "a1b2c3d4-0000-1111-2222-333344445555",
        "session": "projects/shop-bot/agent/sessions/line-session-1",
        "queryResult": {
            "queryText": "ขอคุยกับเจ้าหน้าที่หน่อย",
            "languageCode": "th",
            "intent": {
                "name": "projects/shop-bot/agent/intents/fallback-id",
                "displayName": "Default Fallback Intent",
                "isFallback": True,
            },
            "intentDetectionConfidence": 1,
            "outputContexts": [
                {
                    "name": "projects/shop-bot/agent/sessions/line-session-1/contexts/__system_counters__",
                    "parameters": {"no-input": 0, "no-match": 1},
                }
            ],
        },
        "originalDetectIntentRequest": {
            "source": "line",
            "payload": {
                "data": {
                    "replyToken": "reply-token",
                    "source": {"type": "user", "userId": "U4af4980629"},
                    "type": "message",
                }
            },
        },
    }


@pytest.fixture
def sunday_afternoon():
    return SUNDAY_AFTERNOON


@pytest.fixture
def sunday_evening():
    return SUNDAY_EVENING
