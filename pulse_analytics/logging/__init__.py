"""
Structured Logging for Pulse Analytics
======================================

Bounded Context: Observability

JSON-structured diagnostics for the analytics client itself. Logging is
diagnostic only: send outcomes are always delivered through the result
future, whether or not they are logged.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from pulse_analytics.logging import create_logger, LogEvent
    >>> logger = create_logger("composer")
    >>> logger.info(
    ...     event=LogEvent.EVENT_COMPOSED,
    ...     message="Composed event",
    ...     metadata={'event_type': 'open_app'}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
