"""
Base Transport
==============

Bounded Context: Delivery Infrastructure

This module provides the abstract base class for transports.

Design:
- Endpoint validation and JSON serialization up front
- Delivery on a worker pool (callers never block)
- Exactly one SendResult per send, delivered through a Future
  and an optional handler, always on a worker thread
- Structured logging integration

Architecture:
    BaseTransport (abstract)
        ↓
    HttpTransport (concrete)

Responsibilities:
- Worker pool lifecycle
- Mapping every failure onto the AnalyticsError taxonomy
- NOT responsible for: Envelope composition (EventComposer)
- NOT responsible for: Retries, batching, persistence

Example:
    >>> class PrintTransport(BaseTransport):
    ...     def _deliver(self, endpoint, body):
    ...         print(endpoint, body)
"""

import json
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse

from ..errors import (
    AnalyticsError,
    InvalidEndpointError,
    InvalidPayloadError,
    NetworkFailureError,
    ServerRejectedError,
)
from ..logging import StructuredLogger, LogEvent, create_logger
from ..schemas import Payload, SendResult

ResultHandler = Callable[[SendResult], None]

_ERROR_EVENTS = {
    InvalidEndpointError.kind: LogEvent.INVALID_ENDPOINT_ERROR,
    InvalidPayloadError.kind: LogEvent.SERIALIZATION_ERROR,
    NetworkFailureError.kind: LogEvent.NETWORK_ERROR,
    ServerRejectedError.kind: LogEvent.SERVER_REJECTED_ERROR,
}


def validate_endpoint(endpoint: str) -> None:
    """
    Check that endpoint is an absolute http(s) URL.

    Raises:
        InvalidEndpointError: If it is not
    """
    try:
        parsed = urlparse(endpoint)
    except (TypeError, ValueError, AttributeError):
        raise InvalidEndpointError(endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise InvalidEndpointError(endpoint)


def serialize_payload(payload: Payload) -> bytes:
    """
    Encode a payload as compact UTF-8 JSON.

    NaN and infinity are rejected since they are not valid JSON.

    Raises:
        InvalidPayloadError: If the payload holds a non-JSON value
    """
    try:
        return json.dumps(
            payload.to_dict(),
            allow_nan=False,
            separators=(",", ":")
        ).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as e:
        raise InvalidPayloadError(f"Payload is not JSON-serializable: {e}") from e


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    Subclasses implement _deliver(), which performs one blocking exchange
    and raises an AnalyticsError on failure. send() runs it on a worker
    thread and resolves the returned Future with a SendResult.

    Attributes:
        logger: Structured logger instance
        max_workers: Size of the worker pool

    Thread Safety:
        send() may be called from any thread. Counters are guarded by a lock.
    """

    def __init__(
        self,
        logger: Optional[StructuredLogger] = None,
        max_workers: int = 4
    ):
        """
        Initialize transport.

        Args:
            logger: Structured logger (default: "transport" component logger)
            max_workers: Worker threads used for delivery
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.logger = logger or create_logger("transport")
        self.max_workers = max_workers

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="pulse-transport"
        )
        self._closed = threading.Event()
        self._sent_count = 0
        self._failed_count = 0
        self._stats_lock = threading.Lock()

    @abstractmethod
    def _deliver(self, endpoint: str, body: bytes) -> None:
        """
        Perform one exchange with the remote endpoint.

        Runs on a worker thread.

        Raises:
            NetworkFailureError: If the exchange did not complete
            ServerRejectedError: If the remote answered outside 2xx
        """
        raise NotImplementedError("Subclasses must implement _deliver()")

    def send(
        self,
        endpoint: str,
        payload: Payload,
        on_done: Optional[ResultHandler] = None
    ) -> "Future[SendResult]":
        """
        Send a payload without blocking.

        Validation failures and sends after close() are reported the same
        way as delivery failures: on a worker thread, never inline.

        Args:
            endpoint: Ingestion URL
            payload: Payload to send
            on_done: Called once with the SendResult on a worker thread,
                before the future resolves

        Returns:
            Future resolving to exactly one SendResult. The future never
            raises; failures are carried in SendResult.error.

        Example:
            >>> future = transport.send(endpoint, payload)
            >>> future.result().ok
            True
        """
        future: "Future[SendResult]" = Future()

        error: Optional[AnalyticsError] = None
        try:
            validate_endpoint(endpoint)
            body = serialize_payload(payload)
            if self._closed.is_set():
                raise NetworkFailureError(RuntimeError("transport is closed"))
        except AnalyticsError as e:
            error = e

        if error is None:
            if self._submit(self._run, future, endpoint, payload, body, on_done):
                return future
            # Pool shut down between the closed check and submit
            error = NetworkFailureError(RuntimeError("transport is closed"))

        args = (future, endpoint, payload, error, on_done)
        if not self._submit(self._complete, *args):
            threading.Thread(
                target=self._complete,
                args=args,
                name="pulse-transport-closed",
                daemon=True
            ).start()
        return future

    def _submit(self, fn: Callable[..., None], *args: Any) -> bool:
        """Queue fn on the pool. False once the pool is shut down."""
        try:
            self._executor.submit(fn, *args)
        except RuntimeError:
            return False
        return True

    def _run(
        self,
        future: "Future[SendResult]",
        endpoint: str,
        payload: Payload,
        body: bytes,
        on_done: Optional[ResultHandler]
    ) -> None:
        """Worker body: deliver and resolve the future."""
        error: Optional[AnalyticsError] = None
        try:
            self._deliver(endpoint, body)
        except AnalyticsError as e:
            error = e
        except Exception as e:
            error = NetworkFailureError(e)
        self._complete(future, endpoint, payload, error, on_done)

    def _complete(
        self,
        future: "Future[SendResult]",
        endpoint: str,
        payload: Payload,
        error: Optional[AnalyticsError],
        on_done: Optional[ResultHandler]
    ) -> None:
        """Record, log, notify and resolve. Cancelled futures are left alone."""
        with self._stats_lock:
            if error is None:
                self._sent_count += 1
            else:
                self._failed_count += 1

        if error is not None:
            self.logger.warning(
                event=_ERROR_EVENTS.get(error.kind, LogEvent.EVENT_SEND_FAILED),
                message="Delivery failed",
                exc_info=error,
                metadata={
                    'endpoint': endpoint,
                    'error_kind': error.kind,
                    'event_count': payload.event_count
                }
            )

        if not future.set_running_or_notify_cancel():
            return

        result = SendResult(payload=payload, error=error)
        if on_done is not None:
            try:
                on_done(result)
            except Exception as e:
                # Runs on a worker thread; nowhere to re-raise
                self.logger.error(
                    event=LogEvent.COMPLETION_ERROR,
                    message="Result handler raised",
                    exc_info=e
                )
        future.set_result(result)

    def close(self, wait: bool = True) -> None:
        """
        Shut down the worker pool.

        Sends issued after close() resolve with NetworkFailureError.

        Args:
            wait: Block until in-flight deliveries finish
        """
        if self._closed.is_set():
            return
        self._closed.set()
        self._executor.shutdown(wait=wait)
        self.logger.info(
            event=LogEvent.TRANSPORT_CLOSED,
            message="Transport closed",
            metadata=self.get_stats()
        )

    def is_closed(self) -> bool:
        """Check if close() has been called."""
        return self._closed.is_set()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get transport statistics.

        Returns:
            Dictionary with sent/failed counts and closed flag
        """
        with self._stats_lock:
            return {
                'sent_count': self._sent_count,
                'failed_count': self._failed_count,
                'closed': self._closed.is_set()
            }

    def __enter__(self) -> "BaseTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
