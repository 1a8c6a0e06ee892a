"""Dialogflow ES webhook request and response models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Intent(BaseModel):
    """Matched intent reference."""

    name: Optional[str] = None
    display_name: str = Field(default="", alias="displayName")

    class Config:
        populate_by_name = True
        extra = "allow"


class QueryResult(BaseModel):
    """Result of conversational query as sent to the webhook."""

    query_text: str = Field(default="", alias="queryText")
    language_code: Optional[str] = Field(default=None, alias="languageCode")
    intent: Optional[Intent] = None
    intent_detection_confidence: Optional[float] = Field(
        default=None, alias="intentDetectionConfidence"
    )
    output_contexts: List[Dict[str, Any]] = Field(default_factory=list, alias="outputContexts")

    class Config:
        populate_by_name = True
        extra = "allow"


class OriginalDetectIntentRequest(BaseModel):
    """Platform request that triggered the query (e.g. LINE)."""

    source: Optional[str] = None
    version: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "allow"


class WebhookRequest(BaseModel):
    """Dialogflow ES fulfillment webhook request."""

    response_id: Optional[str] = Field(default=None, alias="responseId")
    session: Optional[str] = None
    query_result: QueryResult = Field(default_factory=QueryResult, alias="queryResult")
    original_detect_intent_request: Optional[OriginalDetectIntentRequest] = Field(
        default=None, alias="originalDetectIntentRequest"
    )

    class Config:
        populate_by_name = True
        extra = "allow"

    @property
    def intent_name(self) -> str:
        intent = self.query_result.intent
        return intent.display_name if intent else ""

    @property
    def user_id(self) -> Optional[str]:
        """Chat platform user id at ``payload.data.source.userId``, if any."""
        if not self.original_detect_intent_request:
            return None

        node: Any = self.original_detect_intent_request.payload
        for key in ("data", "source", "userId"):
            if not isinstance(node, dict):
                return None
            node = node.get(key)

        if node is None:
            return None
        return str(node)


class WebhookResponse(BaseModel):
    """Dialogflow ES fulfillment webhook response."""

    fulfillment_text: str = Field(default="", alias="fulfillmentText")
    fulfillment_messages: List[Dict[str, Any]] = Field(
        default_factory=list, alias="fulfillmentMessages"
    )
    output_contexts: List[Dict[str, Any]] = Field(default_factory=list, alias="outputContexts")

    class Config:
        populate_by_name = True

    @classmethod
    def from_text(
        cls,
        text: str,
        output_contexts: Optional[List[Dict[str, Any]]] = None
    ) -> "WebhookResponse":
        """Build a plain text response, echoing the request's contexts."""
        return cls(
            fulfillment_text=text,
            fulfillment_messages=[{"text": {"text": [text]}}],
            output_contexts=list(output_contexts or []),
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
