"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for the analytics client's own diagnostics.

Event Naming Convention:
    <category>.<action>

    category: event, config, transport, error
    action: composed, sent, send_failed, ...

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, metadata.event_type, metadata.error_kind
    | filter event = "event.send_failed"
    | stats count() by metadata.error_kind
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - event.*: Envelope composition and delivery outcome
    - config.*: Configuration changes
    - transport.*: Transport lifecycle
    - error.*: Failure kinds reported by the transport
    """

    # ========== Event Pipeline ==========
    EVENT_COMPOSED = "event.composed"
    """Envelope built and handed to the transport."""

    EVENT_SENT = "event.sent"
    """Transport reported success."""

    EVENT_SEND_FAILED = "event.send_failed"
    """Transport reported a failure."""

    # ========== Configuration ==========
    CONFIG_API_KEY_UPDATED = "config.api_key_updated"
    """API key set or rotated."""

    # ========== Transport ==========
    TRANSPORT_CLOSED = "transport.closed"
    """Worker pool shut down."""

    # ========== Error Events ==========
    INVALID_ENDPOINT_ERROR = "error.invalid_endpoint"
    """Endpoint could not be parsed as an HTTP(S) URL."""

    SERIALIZATION_ERROR = "error.serialization"
    """Payload could not be serialized to JSON."""

    NETWORK_ERROR = "error.network"
    """Exchange with the remote endpoint did not complete."""

    SERVER_REJECTED_ERROR = "error.server_rejected"
    """Remote endpoint answered outside the 2xx range."""

    COMPLETION_ERROR = "error.completion"
    """Caller-supplied completion handler raised."""
