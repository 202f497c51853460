"""
HTTP Transport
==============

Bounded Context: HTTP Delivery

POSTs serialized payloads to an HTTP ingestion API (Amplitude HTTP V2
compatible by default).

Message Flow:
    EventComposer → Payload → HttpTransport → POST endpoint → SendResult

Example:
    >>> from pulse_analytics.transport import HttpTransport
    >>> transport = HttpTransport(timeout=5.0)
    >>> future = transport.send("https://api2.amplitude.com/2/httpapi", payload)
    >>> future.result().ok
"""

from typing import Dict, Optional

import requests

from .base import BaseTransport
from ..errors import NetworkFailureError, ServerRejectedError
from ..logging import StructuredLogger

DEFAULT_ENDPOINT = "https://api2.amplitude.com/2/httpapi"


class HttpTransport(BaseTransport):
    """
    Transport that POSTs JSON over HTTP(S) with requests.

    Attributes:
        Same as BaseTransport, plus:
        timeout: Per-request timeout in seconds
        session: requests.Session reused across sends
    """

    def __init__(
        self,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        headers: Optional[Dict[str, str]] = None,
        logger: Optional[StructuredLogger] = None,
        max_workers: int = 4
    ):
        """
        Initialize HTTP transport.

        Args:
            timeout: Request timeout in seconds (connect and read)
            session: Session to use (default: a new one, closed on close())
            headers: Extra headers sent with every request
            logger: Structured logger instance
            max_workers: Worker threads used for delivery
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {timeout}")
        super().__init__(logger=logger, max_workers=max_workers)

        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.headers = {
            'Content-Type': 'application/json',
            'Accept': '*/*',
        }
        if headers:
            self.headers.update(headers)

    def _deliver(self, endpoint: str, body: bytes) -> None:
        try:
            response = self.session.post(
                endpoint,
                data=body,
                headers=self.headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise NetworkFailureError(e)

        if not 200 <= response.status_code < 300:
            raise ServerRejectedError(response.status_code, body=response.text)

    def close(self, wait: bool = True) -> None:
        super().close(wait=wait)
        if self._owns_session:
            self.session.close()
