"""
Event Composer
==============

Bounded Context: Event Composition and Dispatch

Public logging API of the analytics client. Each call builds one
EventEnvelope, enriches it with requested environment fields, wraps it in
a Payload with the current API key and hands it to the transport.

Design:
- One generic primitive (log_event) plus convenience wrappers
- Non-blocking: every call returns a Future[SendResult]
- No shared per-call state; the API key is the only mutable setting
- Synthesized properties lose to caller-supplied ones on key collision

Message Flow:
    log_*() → compose() → Payload → BaseTransport.send() → SendResult

Example:
    >>> from pulse_analytics import EventComposer, HttpTransport, EnrichmentField
    >>> composer = EventComposer(transport=HttpTransport())
    >>> composer.configure("YOUR_API_KEY")
    >>> future = composer.log_click_event(
    ...     "u1", "buy_button", fields=[EnrichmentField.PLATFORM]
    ... )
    >>> future.result().ok
    True
"""

from concurrent.futures import Future
from functools import partial
from typing import Any, Callable, Dict, Iterable, Optional

from .config import AnalyticsConfig, Configuration
from .environment import (
    EnvironmentInfoProvider,
    SystemEnvironmentProvider,
    create_environment,
)
from .logging import StructuredLogger, LogEvent, create_logger
from .schemas import EventEnvelope, Payload, Properties, SendResult, expand_fields
from .schemas.fields import FieldLike
from .transport import BaseTransport, HttpTransport, DEFAULT_ENDPOINT

Completion = Callable[[SendResult], None]


def merge_properties(
    synthesized: Dict[str, Any],
    supplied: Optional[Properties]
) -> Dict[str, Any]:
    """Combine property mappings; supplied values win on key collision."""
    merged = dict(synthesized)
    if supplied:
        merged.update(supplied)
    return merged


class EventComposer:
    """
    Builds analytics events and dispatches them through a transport.

    Attributes:
        transport: Transport used for every send (owned by the composer)
        environment: Provider queried for enrichment fields
        endpoint: Ingestion URL handed to the transport
        default_fields: Fields used when a call passes fields=None
        logger: Structured logger instance

    Thread Safety:
        Logging methods may be called concurrently. Envelopes depend only
        on call arguments plus the API key and environment at call time.
    """

    def __init__(
        self,
        transport: BaseTransport,
        environment: Optional[EnvironmentInfoProvider] = None,
        endpoint: str = DEFAULT_ENDPOINT,
        api_key: Optional[str] = None,
        default_fields: Iterable[FieldLike] = (),
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize composer.

        Args:
            transport: Transport used for delivery
            environment: Enrichment provider (default: SystemEnvironmentProvider)
            endpoint: Ingestion URL (validated by the transport at send time)
            api_key: Initial API key (may be set later via configure())
            default_fields: Enrichment fields applied when a call gives none
            logger: Structured logger (default: "composer" component logger)
        """
        self.transport = transport
        self.environment = environment or SystemEnvironmentProvider()
        self.endpoint = endpoint
        self.default_fields = expand_fields(default_fields)
        self.logger = logger or create_logger("composer")
        self._config = Configuration(api_key)

    @classmethod
    def from_config(
        cls,
        config: AnalyticsConfig,
        transport: Optional[BaseTransport] = None,
        environment: Optional[EnvironmentInfoProvider] = None,
        logger: Optional[StructuredLogger] = None
    ) -> "EventComposer":
        """
        Build a composer and its collaborators from AnalyticsConfig.

        Args:
            config: Loaded configuration
            transport: Override transport (default: HttpTransport from config)
            environment: Override provider (default: system provider with
                config.environment_overrides layered on top)
            logger: Structured logger instance

        Example:
            >>> config = AnalyticsConfig.from_yaml("config/analytics.yaml")
            >>> composer = EventComposer.from_config(config)
        """
        if transport is None:
            transport = HttpTransport(
                timeout=config.timeout,
                max_workers=config.max_workers
            )

        if environment is None:
            environment = create_environment(
                app_version=config.app_version,
                overrides=config.environment_overrides
            )

        return cls(
            transport=transport,
            environment=environment,
            endpoint=config.endpoint,
            api_key=config.api_key,
            default_fields=config.default_fields,
            logger=logger
        )

    # ========== Configuration ==========

    def configure(self, api_key: str) -> None:
        """
        Set or rotate the API key used by subsequent sends.

        Sending without a key is allowed; the payload carries api_key=None
        and the remote decides.
        """
        if self._config.configure(api_key):
            self.logger.info(
                event=LogEvent.CONFIG_API_KEY_UPDATED,
                message="API key updated"
            )

    @property
    def api_key(self) -> Optional[str]:
        return self._config.api_key

    # ========== Composition ==========

    def compose(
        self,
        user_id: str,
        event_type: str,
        screen: Optional[str] = None,
        session_id: Optional[str] = None,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None
    ) -> EventEnvelope:
        """
        Build an envelope without sending it.

        user_id and event_type are passed through unchecked. Enrichment
        fields with no available value are left out. `screen` is written
        into event properties, overriding a caller-supplied "screen".

        Raises:
            ValueError: If fields names an unknown enrichment field
        """
        concrete = self.default_fields if fields is None else expand_fields(fields)

        enrichment: Dict[str, str] = {}
        for field in concrete:
            value = self.environment.lookup(field)
            if value is not None:
                enrichment[field.key] = value

        properties = dict(event_properties or {})
        if screen is not None:
            properties['screen'] = screen

        return EventEnvelope(
            user_id=user_id,
            event_type=event_type,
            session_id=session_id,
            user_properties=dict(user_properties) if user_properties is not None else None,
            event_properties=properties,
            enrichment=enrichment
        )

    # ========== Logging API ==========

    def log_event(
        self,
        user_id: str,
        event_type: str,
        screen: Optional[str] = None,
        session_id: Optional[str] = None,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None,
        completion: Optional[Completion] = None
    ) -> "Future[SendResult]":
        """
        Compose and send one event.

        Args:
            user_id: ID of the user triggering the event
            event_type: Event name
            screen: Screen where the event occurred (event property)
            session_id: Session ID
            user_properties: User-level properties, sent verbatim
            event_properties: Event-level properties
            fields: Enrichment fields (None: use default_fields)
            completion: Called once with the SendResult on a transport worker
                thread, before the future resolves

        Returns:
            Future resolving to the SendResult (never raises)
        """
        envelope = self.compose(
            user_id=user_id,
            event_type=event_type,
            screen=screen,
            session_id=session_id,
            user_properties=user_properties,
            event_properties=event_properties,
            fields=fields
        )
        payload = Payload(api_key=self._config.api_key, events=[envelope])

        self.logger.debug(
            event=LogEvent.EVENT_COMPOSED,
            message="Composed event",
            metadata={
                'event_type': event_type,
                'enrichment_keys': sorted(envelope.enrichment),
                'has_api_key': payload.api_key is not None
            }
        )

        return self.transport.send(
            self.endpoint,
            payload,
            on_done=partial(self._handle_result, completion)
        )

    def log_click_event(
        self,
        user_id: str,
        element: str,
        screen: Optional[str] = None,
        session_id: Optional[str] = None,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None,
        completion: Optional[Completion] = None
    ) -> "Future[SendResult]":
        """
        Log a click on a UI element as "click_<element>".

        The element name is also recorded under event property "element".
        """
        return self.log_event(
            user_id=user_id,
            event_type=f"click_{element}",
            screen=screen,
            session_id=session_id,
            user_properties=user_properties,
            event_properties=merge_properties({'element': element}, event_properties),
            fields=fields,
            completion=completion
        )

    def log_screen_navigation(
        self,
        user_id: str,
        from_screen: str,
        to_screen: str,
        session_id: Optional[str] = None,
        duration: Optional[float] = None,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None,
        completion: Optional[Completion] = None
    ) -> "Future[SendResult]":
        """
        Log a transition between two screens.

        Args:
            from_screen: Screen navigated away from
            to_screen: Screen navigated to
            duration: Seconds spent on from_screen (optional)
        """
        synthesized: Dict[str, Any] = {
            'from_screen': from_screen,
            'to_screen': to_screen,
        }
        if duration is not None:
            synthesized['duration'] = duration

        return self.log_event(
            user_id=user_id,
            event_type="screen_navigation",
            session_id=session_id,
            user_properties=user_properties,
            event_properties=merge_properties(synthesized, event_properties),
            fields=fields,
            completion=completion
        )

    def log_screen_duration(
        self,
        user_id: str,
        screen: str,
        duration: float,
        session_id: Optional[str] = None,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None,
        completion: Optional[Completion] = None
    ) -> "Future[SendResult]":
        """Log seconds spent on a screen."""
        return self.log_event(
            user_id=user_id,
            event_type="screen_duration",
            screen=screen,
            session_id=session_id,
            user_properties=user_properties,
            event_properties=merge_properties({'duration': duration}, event_properties),
            fields=fields,
            completion=completion
        )

    def log_session_duration(
        self,
        user_id: str,
        session_id: str,
        duration: float,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None,
        completion: Optional[Completion] = None
    ) -> "Future[SendResult]":
        """Log the total length of a session in seconds."""
        return self.log_event(
            user_id=user_id,
            event_type="session_duration",
            session_id=session_id,
            user_properties=user_properties,
            event_properties=merge_properties({'duration': duration}, event_properties),
            fields=fields,
            completion=completion
        )

    def log_open_app_event(
        self,
        user_id: str,
        screen: Optional[str] = None,
        session_id: Optional[str] = None,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None,
        completion: Optional[Completion] = None
    ) -> "Future[SendResult]":
        """Log that the application was opened ("open_app")."""
        return self.log_event(
            user_id=user_id,
            event_type="open_app",
            screen=screen,
            session_id=session_id,
            user_properties=user_properties,
            event_properties=event_properties,
            fields=fields,
            completion=completion
        )

    def log_close_app_event(
        self,
        user_id: str,
        screen: Optional[str] = None,
        session_id: Optional[str] = None,
        user_properties: Optional[Properties] = None,
        event_properties: Optional[Properties] = None,
        fields: Optional[Iterable[FieldLike]] = None,
        completion: Optional[Completion] = None
    ) -> "Future[SendResult]":
        """Log that the application was closed ("close_app")."""
        return self.log_event(
            user_id=user_id,
            event_type="close_app",
            screen=screen,
            session_id=session_id,
            user_properties=user_properties,
            event_properties=event_properties,
            fields=fields,
            completion=completion
        )

    # ========== Lifecycle ==========

    def close(self, wait: bool = True) -> None:
        """Close the transport; in-flight sends finish when wait=True."""
        self.transport.close(wait=wait)

    def __enter__(self) -> "EventComposer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _handle_result(
        self,
        completion: Optional[Completion],
        result: SendResult
    ) -> None:
        """Log the outcome, then hand the result to the caller's handler."""
        event_type = result.payload.events[0].event_type
        if result.ok:
            self.logger.info(
                event=LogEvent.EVENT_SENT,
                message="Event sent successfully",
                metadata={'event_type': event_type}
            )
        else:
            self.logger.warning(
                event=LogEvent.EVENT_SEND_FAILED,
                message=f"Failed to send event: {result.error}",
                metadata={
                    'event_type': event_type,
                    'error_kind': result.error.kind
                }
            )

        if completion is None:
            return
        try:
            completion(result)
        except Exception as e:
            self.logger.error(
                event=LogEvent.COMPLETION_ERROR,
                message="Completion handler raised",
                exc_info=e,
                metadata={'event_type': event_type}
            )
