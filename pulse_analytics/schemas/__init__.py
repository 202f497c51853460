"""
Pulse Analytics Schemas
=======================

Bounded Context: Data Structures

Immutable, typed data structures for analytics events.

Design:
- Frozen dataclasses (immutability)
- to_dict() for JSON serialization
- str-valued enums for wire keys

Public API
----------
Fields:
    EnrichmentField: Enum of optional metadata keys (plus ALL)
    CONCRETE_FIELDS: Every field ALL expands to
    expand_fields: Resolve a requested field list

Events:
    EventEnvelope: One analytics event
    Payload: Request body (api_key + events)
    SendResult: Outcome of one send

Example:
    >>> from pulse_analytics.schemas import EventEnvelope, Payload
    >>> env = EventEnvelope(user_id="u1", event_type="open_app")
    >>> Payload(api_key="KEY", events=[env]).to_dict()
    {'api_key': 'KEY', 'events': [{'user_id': 'u1', 'event_type': 'open_app'}]}
"""

from .fields import (
    EnrichmentField,
    CONCRETE_FIELDS,
    coerce_field,
    expand_fields,
)
from .event import (
    JsonValue,
    Properties,
    EventEnvelope,
    Payload,
    SendResult,
)

__all__ = [
    # Fields
    'EnrichmentField',
    'CONCRETE_FIELDS',
    'coerce_field',
    'expand_fields',
    # Events
    'JsonValue',
    'Properties',
    'EventEnvelope',
    'Payload',
    'SendResult',
]
