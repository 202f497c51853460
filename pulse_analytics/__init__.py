"""
Pulse Analytics Client
======================

Bounded Context: Client-side Event Logging

This package turns typed logging calls (generic event, click, screen
navigation, screen duration, session duration, app open/close) into
analytics event envelopes and forwards them to a remote ingestion API.

Architecture:
- schemas/: Immutable event structures and enrichment fields
- environment: Providers for platform/locale/app facts
- transport/: Non-blocking delivery (BaseTransport, HttpTransport)
- composer: EventComposer, the public logging API
- config: YAML configuration and the API key holder
- logging/: Structured JSON logging for the client's own diagnostics

Public API
----------
Composer:
    EventComposer

Configuration:
    AnalyticsConfig, Configuration

Schemas:
    EnrichmentField, CONCRETE_FIELDS, expand_fields
    EventEnvelope, Payload, SendResult

Environment:
    EnvironmentInfoProvider, SystemEnvironmentProvider, StaticEnvironmentProvider

Transport:
    BaseTransport, HttpTransport, DEFAULT_ENDPOINT

Errors:
    AnalyticsError, InvalidEndpointError, InvalidPayloadError,
    NetworkFailureError, ServerRejectedError

Logging:
    LogEvent, StructuredLogger, create_logger

Example:
    >>> from pulse_analytics import EventComposer, HttpTransport, EnrichmentField
    >>>
    >>> composer = EventComposer(transport=HttpTransport())
    >>> composer.configure("YOUR_API_KEY")
    >>>
    >>> composer.log_screen_navigation("u1", "Home", "Details", duration=3.2)
    >>> future = composer.log_event(
    ...     "u1", "purchase",
    ...     event_properties={"sku": "A-100", "price": 9.99},
    ...     fields=[EnrichmentField.ALL],
    ...     completion=lambda result: print(result.ok)
    ... )
"""

# Version
__version__ = "1.0.0"

# Schemas
from .schemas import (
    EnrichmentField,
    CONCRETE_FIELDS,
    expand_fields,
    EventEnvelope,
    Payload,
    SendResult,
)

# Errors
from .errors import (
    AnalyticsError,
    InvalidEndpointError,
    InvalidPayloadError,
    NetworkFailureError,
    ServerRejectedError,
)

# Environment
from .environment import (
    EnvironmentInfoProvider,
    SystemEnvironmentProvider,
    StaticEnvironmentProvider,
    create_environment,
)

# Transport
from .transport import (
    BaseTransport,
    HttpTransport,
    DEFAULT_ENDPOINT,
)

# Configuration
from .config import AnalyticsConfig, Configuration

# Composer
from .composer import EventComposer

# Logging
from .logging import (
    LogEvent,
    StructuredLogger,
    create_logger,
)

__all__ = [
    # Version
    '__version__',
    # Schemas
    'EnrichmentField',
    'CONCRETE_FIELDS',
    'expand_fields',
    'EventEnvelope',
    'Payload',
    'SendResult',
    # Errors
    'AnalyticsError',
    'InvalidEndpointError',
    'InvalidPayloadError',
    'NetworkFailureError',
    'ServerRejectedError',
    # Environment
    'EnvironmentInfoProvider',
    'SystemEnvironmentProvider',
    'StaticEnvironmentProvider',
    'create_environment',
    # Transport
    'BaseTransport',
    'HttpTransport',
    'DEFAULT_ENDPOINT',
    # Configuration
    'AnalyticsConfig',
    'Configuration',
    # Composer
    'EventComposer',
    # Logging
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
