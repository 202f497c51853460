import json
import logging
import threading

import pytest

from pulse_analytics import (
    BaseTransport,
    EventComposer,
    StaticEnvironmentProvider,
    create_logger,
)

ENDPOINT = "https://analytics.test/2/httpapi"

ENVIRONMENT_VALUES = {
    "platform": "macOS",
    "country": "US",
    "language": "en",
    "device_type": "arm64",
    "app_version": "2.3.1",
    "os_name": "Darwin",
    "os_version": "23.1.0",
}


class RecordingTransport(BaseTransport):
    """Captures decoded request bodies instead of sending them."""

    def __init__(self, error=None, **kwargs):
        kwargs.setdefault("logger", create_logger("test.transport", level=logging.ERROR))
        super().__init__(**kwargs)
        self.error = error
        self.requests = []
        self._lock = threading.Lock()

    def _deliver(self, endpoint, body):
        with self._lock:
            self.requests.append((endpoint, json.loads(body)))
        if self.error is not None:
            raise self.error

    @property
    def bodies(self):
        with self._lock:
            return [body for _, body in self.requests]


@pytest.fixture
def environment():
    return StaticEnvironmentProvider(ENVIRONMENT_VALUES)


@pytest.fixture
def transport():
    transport = RecordingTransport()
    yield transport
    transport.close()


@pytest.fixture
def composer(transport, environment):
    return EventComposer(
        transport=transport,
        environment=environment,
        endpoint=ENDPOINT,
        logger=create_logger("test.composer", level=logging.ERROR),
    )


def sent_event(future):
    """Return the single envelope dict carried by a finished send."""
    result = future.result(timeout=5)
    return result.payload.to_dict()["events"][0]
