"""
Event Envelope Schema
=====================

Bounded Context: Analytics Event Data Structures

Message Flow:
    EventComposer → EventEnvelope → Payload → Transport → Ingestion API

Wire shape (one envelope per payload):
    {
        "api_key": "..." | null,
        "events": [{
            "user_id": "u1",
            "event_type": "click_buy_button",
            "session_id": "s1",                 # optional
            "user_properties": {...},           # optional
            "event_properties": {...},          # optional, never empty
            "platform": "macOS", ...            # optional enrichment keys
        }]
    }
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import AnalyticsError

# JSON-compatible property values. Not enforced at construction; values
# that fail to serialize surface as InvalidPayloadError at send time.
JsonScalar = Union[str, int, float, bool, None]
JsonValue = Union[JsonScalar, List[Any], Dict[str, Any]]
Properties = Mapping[str, JsonValue]


@dataclass(frozen=True)
class EventEnvelope:
    """
    One analytics event ready for transmission.

    Attributes:
        user_id: User who triggered the event
        event_type: Event name (e.g. "open_app", "click_buy_button")
        session_id: Session identifier (optional)
        user_properties: User-level properties, sent verbatim (optional)
        event_properties: Event-level properties (optional)
        enrichment: Environment facts keyed by envelope key

    Invariants:
        - event_properties is only emitted when non-empty
        - enrichment never contains the "all" meta-field

    Example:
        >>> env = EventEnvelope(user_id="u1", event_type="open_app")
        >>> env.to_dict()
        {'user_id': 'u1', 'event_type': 'open_app'}
    """
    user_id: str
    event_type: str
    session_id: Optional[str] = None
    user_properties: Optional[Dict[str, JsonValue]] = None
    event_properties: Dict[str, JsonValue] = field(default_factory=dict)
    enrichment: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate invariants."""
        if "all" in self.enrichment:
            raise ValueError("'all' is not a valid enrichment key")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        result: Dict[str, Any] = {
            'user_id': self.user_id,
            'event_type': self.event_type,
        }
        result.update(self.enrichment)
        if self.session_id is not None:
            result['session_id'] = self.session_id
        if self.user_properties is not None:
            result['user_properties'] = dict(self.user_properties)
        if self.event_properties:
            result['event_properties'] = dict(self.event_properties)
        return result


@dataclass(frozen=True)
class Payload:
    """
    Request body for the ingestion endpoint.

    Attributes:
        api_key: Configured API key, None when not configured yet
        events: Envelopes to send (the composer always sends one)
    """
    api_key: Optional[str]
    events: List[EventEnvelope]

    def __post_init__(self):
        """Validate invariants."""
        if not self.events:
            raise ValueError("Payload must contain at least one event")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'api_key': self.api_key,
            'events': [event.to_dict() for event in self.events]
        }

    @property
    def event_count(self) -> int:
        """Number of envelopes in this payload."""
        return len(self.events)


@dataclass(frozen=True)
class SendResult:
    """
    Outcome of one send.

    Attributes:
        payload: Payload handed to the transport
        error: Failure, None on success
    """
    payload: Payload
    error: Optional[AnalyticsError] = None

    @property
    def ok(self) -> bool:
        """True when the remote accepted the payload."""
        return self.error is None
