"""
Transports
==========

Bounded Context: Payload Delivery

Design:
- BaseTransport: Abstract base with worker pool and failure mapping
- HttpTransport: JSON over HTTP(S) via requests
- Separation of concerns: the composer builds payloads, transports deliver

Public API
----------
    BaseTransport: Abstract transport (for custom transports)
    HttpTransport: HTTP transport
    DEFAULT_ENDPOINT: Default ingestion URL
"""

from .base import BaseTransport, serialize_payload, validate_endpoint
from .http import HttpTransport, DEFAULT_ENDPOINT

__all__ = [
    'BaseTransport',
    'HttpTransport',
    'DEFAULT_ENDPOINT',
    'serialize_payload',
    'validate_endpoint',
]
