"""
Analytics Errors
================

Bounded Context: Failure Taxonomy

Failures a send can end in. They are terminal (nothing is retried) and are
delivered as values inside a SendResult, never raised to the caller of a
logging method.

    AnalyticsError
    ├── InvalidEndpointError   endpoint is not an http(s) URL
    ├── InvalidPayloadError    payload is not JSON-serializable
    ├── NetworkFailureError    exchange did not complete (wraps cause)
    └── ServerRejectedError    response status outside 200-299
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for analytics send failures."""

    kind = "analytics_error"


class InvalidEndpointError(AnalyticsError):
    """The remote address cannot be parsed as an HTTP(S) URL."""

    kind = "invalid_endpoint"

    def __init__(self, endpoint: str):
        super().__init__(f"Invalid endpoint URL: {endpoint!r}")
        self.endpoint = endpoint


class InvalidPayloadError(AnalyticsError):
    """The payload cannot be serialized to JSON."""

    kind = "invalid_payload"


class NetworkFailureError(AnalyticsError):
    """
    The underlying transport could not complete the exchange.

    Attributes:
        cause: Original exception (DNS, connection, timeout, ...)
    """

    kind = "network_failure"

    def __init__(self, cause: BaseException):
        super().__init__(f"Network failure: {cause}")
        self.cause = cause
        self.__cause__ = cause


class ServerRejectedError(AnalyticsError):
    """
    The remote responded outside the success range.

    Attributes:
        status_code: HTTP status code of the response
        body: Response body, if it could be read
    """

    kind = "server_rejected"

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"Server rejected event (HTTP {status_code})")
        self.status_code = status_code
        self.body = body
