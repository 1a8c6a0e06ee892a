"""Unit tests for record and webhook models."""

import pytest

from fallback_webhook.exceptions import StoreReadError
from fallback_webhook.models.dialogflow import WebhookRequest, WebhookResponse
from fallback_webhook.models.fallback import FallbackOutcome, FallbackStatus, UserFallbackRecord
from fallback_webhook.storage.base import FallbackStore


class TestUserFallbackRecord:
    """Test the UserFallbackRecord model."""

    def test_record_from_store_fields(self):
        """Test camelCase store fields map onto the model."""
        record = UserFallbackRecord.model_validate({
            "lastFallbackTime": 1710055800000,
            "lastUpdated": "2024-03-10T14:30:00.000+07:00",
            "userId": "U123",
        })

        assert record.last_fallback_time == 1710055800000
        assert record.last_updated == "2024-03-10T14:30:00.000+07:00"
        assert record.user_id == "U123"

    def test_missing_fields_default(self):
        """Test an empty record means never escalated."""
        record = UserFallbackRecord.model_validate({})

        assert record.last_fallback_time == 0
        assert record.last_updated is None
        assert record.user_id is None

    def test_null_time_defaults_to_zero(self):
        """Test a null timestamp is treated like a missing one."""
        record = UserFallbackRecord.model_validate({"lastFallbackTime": None})

        assert record.last_fallback_time == 0

    def test_extra_fields_ignored(self):
        """Test unrelated fields stored alongside are tolerated."""
        record = UserFallbackRecord.model_validate({"lastFallbackTime": 5, "displayName": "x"})

        assert record.to_store() == {"lastFallbackTime": 5}

    def test_to_store_uses_aliases(self):
        """Test serialization back to store field names."""
        record = UserFallbackRecord(last_fallback_time=10, user_id="U1")

        assert record.to_store() == {"lastFallbackTime": 10, "userId": "U1"}


class TestRecordParsing:
    """Test validation at the store boundary."""

    def test_missing_record(self):
        assert FallbackStore.parse_record("U1", None) is None

    @pytest.mark.parametrize(
        "raw",
        [
            "not-a-record",
            42,
            ["lastFallbackTime", 1],
            {"lastFallbackTime": "soon"},
            {"lastFallbackTime": 1.5},
            {"lastFallbackTime": -1},
            {"lastFallbackTime": True},
        ],
    )
    def test_malformed_records_raise(self, raw):
        """Test malformed values become store read errors."""
        with pytest.raises(StoreReadError):
            FallbackStore.parse_record("U1", raw)


class TestFallbackOutcome:
    """Test the FallbackOutcome variants."""

    def test_escalated(self):
        outcome = FallbackOutcome.escalated("U1", "hello", True)

        assert outcome.status == FallbackStatus.ESCALATED
        assert outcome.is_escalated and not outcome.is_failed
        assert outcome.message == "hello"

    def test_suppressed(self):
        outcome = FallbackOutcome.suppressed("U1")

        assert outcome.is_suppressed
        assert outcome.message is None

    def test_failed(self):
        outcome = FallbackOutcome.failed("U1", "boom", "store_write")

        assert outcome.is_failed
        assert outcome.reason == "boom"
        assert outcome.error_kind == "store_write"


class TestWebhookRequest:
    """Test Dialogflow request parsing."""

    def test_parse_line_request(self, sample_webhook_payload):
        """Test intent and LINE user id extraction."""
        request = WebhookRequest.model_validate(sample_webhook_payload)

        assert request.intent_name == "Default Fallback Intent"
        assert request.user_id == "U4af4980629"
        assert request.query_result.query_text == "ขอคุยกับเจ้าหน้าที่หน่อย"
        assert len(request.query_result.output_contexts) == 1

    def test_missing_original_request(self, sample_webhook_payload):
        """Test requests from the Dialogflow console have no user id."""
        del sample_webhook_payload["originalDetectIntentRequest"]

        request = WebhookRequest.model_validate(sample_webhook_payload)

        assert request.user_id is None

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"data": None},
            {"data": {"source": "line"}},
            {"data": {"source": {"type": "group"}}},
        ],
    )
    def test_partial_payloads(self, sample_webhook_payload, payload):
        """Test incomplete platform payloads yield no user id."""
        sample_webhook_payload["originalDetectIntentRequest"]["payload"] = payload

        assert WebhookRequest.model_validate(sample_webhook_payload).user_id is None

    def test_missing_intent(self):
        request = WebhookRequest.model_validate({"queryResult": {"queryText": "hi"}})

        assert request.intent_name == ""


class TestWebhookResponse:
    """Test Dialogflow response rendering."""

    def test_text_response(self):
        contexts = [{"name": "ctx", "lifespanCount": 2}]

        payload = WebhookResponse.from_text("hello", contexts).to_payload()

        assert payload == {
            "fulfillmentText": "hello",
            "fulfillmentMessages": [{"text": {"text": ["hello"]}}],
            "outputContexts": contexts,
        }

    def test_empty_response(self):
        payload = WebhookResponse.from_text("").to_payload()

        assert payload["fulfillmentText"] == ""
        assert payload["fulfillmentMessages"] == [{"text": {"text": [""]}}]
        assert payload["outputContexts"] == []
