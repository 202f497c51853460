"""Tests for BaseTransport failure mapping and HttpTransport."""

import json
import logging
import threading
from unittest import mock

import pytest
import requests

from pulse_analytics import (
    EventEnvelope,
    HttpTransport,
    InvalidEndpointError,
    InvalidPayloadError,
    NetworkFailureError,
    Payload,
    ServerRejectedError,
    create_logger,
)
from pulse_analytics.transport import serialize_payload, validate_endpoint

from conftest import ENDPOINT, RecordingTransport

QUIET = create_logger("test.transport", level=logging.CRITICAL)


def make_payload(**event_properties):
    envelope = EventEnvelope(
        user_id="u1",
        event_type="e",
        event_properties=event_properties,
    )
    return Payload(api_key="KEY", events=[envelope])


def mock_session(status_code=200, text="", side_effect=None):
    session = mock.Mock(spec=requests.Session)
    if side_effect is not None:
        session.post.side_effect = side_effect
    else:
        session.post.return_value = mock.Mock(status_code=status_code, text=text)
    return session


@pytest.mark.parametrize("endpoint", [
    "https://api2.amplitude.com/2/httpapi",
    "http://localhost:8080/ingest",
])
def test_validate_endpoint_accepts_http_urls(endpoint):
    validate_endpoint(endpoint)


@pytest.mark.parametrize("endpoint", [
    "",
    "not a url",
    "ftp://example.com/ingest",
    "https://",
    "/relative/path",
    "http://[::1",
])
def test_validate_endpoint_rejects(endpoint):
    with pytest.raises(InvalidEndpointError):
        validate_endpoint(endpoint)


def test_serialize_payload_is_compact_json():
    body = serialize_payload(make_payload(price=9.99))
    assert json.loads(body) == {
        "api_key": "KEY",
        "events": [{
            "user_id": "u1",
            "event_type": "e",
            "event_properties": {"price": 9.99},
        }],
    }
    assert b" " not in body


@pytest.mark.parametrize("value", [object(), float("nan"), float("inf"), {1, 2}])
def test_serialize_payload_rejects_non_json(value):
    with pytest.raises(InvalidPayloadError):
        serialize_payload(make_payload(bad=value))


def test_invalid_endpoint_reported_in_result():
    transport = RecordingTransport(logger=QUIET)
    future = transport.send("mailto:someone", make_payload())
    assert isinstance(future.result(timeout=5).error, InvalidEndpointError)
    assert transport.requests == []
    transport.close()


def test_success_result_and_stats():
    transport = RecordingTransport(logger=QUIET)
    result = transport.send(ENDPOINT, make_payload()).result(timeout=5)
    transport.close()

    assert result.ok
    assert transport.get_stats() == {
        "sent_count": 1,
        "failed_count": 0,
        "closed": True,
    }


def test_deliver_runs_off_caller_thread():
    threads = []

    class ThreadRecorder(RecordingTransport):
        def _deliver(self, endpoint, body):
            threads.append(threading.current_thread())

    transport = ThreadRecorder(logger=QUIET)
    transport.send(ENDPOINT, make_payload()).result(timeout=5)
    transport.close()
    assert threads and threads[0] is not threading.current_thread()


@pytest.mark.parametrize("endpoint, payload, closed", [
    (ENDPOINT, make_payload(), False),
    ("not a url", make_payload(), False),
    (ENDPOINT, make_payload(bad=object()), False),
    (ENDPOINT, make_payload(), True),
])
def test_on_done_runs_on_worker_thread(endpoint, payload, closed):
    seen = []
    transport = RecordingTransport(logger=QUIET)
    if closed:
        transport.close()

    def on_done(result):
        seen.append((threading.current_thread(), result))

    future = transport.send(endpoint, payload, on_done=on_done)
    result = future.result(timeout=5)
    transport.close()

    assert len(seen) == 1
    thread, handled = seen[0]
    assert thread is not threading.current_thread()
    assert handled is result


def test_on_done_runs_before_future_resolves():
    release = threading.Event()
    transport = RecordingTransport(logger=QUIET)
    future = transport.send(ENDPOINT, make_payload(), on_done=lambda result: release.wait(5))
    assert not future.done()
    release.set()
    assert future.result(timeout=5).ok
    transport.close()


def test_raising_on_done_still_resolves(caplog):
    logger = create_logger("test.on_done", level=logging.ERROR)
    transport = RecordingTransport(logger=logger)

    def on_done(result):
        raise RuntimeError("handler bug")

    with caplog.at_level(logging.ERROR, logger="pulse_analytics.test.on_done"):
        result = transport.send(ENDPOINT, make_payload(), on_done=on_done).result(timeout=5)
        transport.close()

    assert result.ok
    assert any('"event": "error.completion"' in r.getMessage() for r in caplog.records)


def test_unexpected_exception_becomes_network_failure():
    boom = RuntimeError("boom")
    transport = RecordingTransport(error=boom, logger=QUIET)
    result = transport.send(ENDPOINT, make_payload()).result(timeout=5)
    transport.close()

    assert isinstance(result.error, NetworkFailureError)
    assert result.error.cause is boom
    assert result.error.__cause__ is boom


def test_send_after_close_fails():
    transport = RecordingTransport(logger=QUIET)
    transport.close()
    result = transport.send(ENDPOINT, make_payload()).result(timeout=5)
    assert isinstance(result.error, NetworkFailureError)
    assert transport.is_closed()


def test_close_is_idempotent():
    transport = RecordingTransport(logger=QUIET)
    transport.close()
    transport.close()


def test_max_workers_validated():
    with pytest.raises(ValueError):
        RecordingTransport(max_workers=0)


def test_http_success_posts_json():
    session = mock_session(status_code=200)
    with HttpTransport(timeout=2.5, session=session, logger=QUIET) as transport:
        result = transport.send(ENDPOINT, make_payload(price=1)).result(timeout=5)

    assert result.ok
    args, kwargs = session.post.call_args
    assert args == (ENDPOINT,)
    assert kwargs["timeout"] == 2.5
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert json.loads(kwargs["data"])["events"][0]["event_properties"] == {"price": 1}


def test_http_extra_headers():
    session = mock_session(status_code=200)
    with HttpTransport(session=session, headers={"X-Client": "pulse"}, logger=QUIET) as transport:
        transport.send(ENDPOINT, make_payload()).result(timeout=5)
    assert session.post.call_args[1]["headers"]["X-Client"] == "pulse"


@pytest.mark.parametrize("status_code", [199, 300, 400, 413, 429, 500, 503])
def test_http_non_2xx_is_server_rejected(status_code):
    session = mock_session(status_code=status_code, text='{"error": "bad"}')
    with HttpTransport(session=session, logger=QUIET) as transport:
        result = transport.send(ENDPOINT, make_payload()).result(timeout=5)

    assert isinstance(result.error, ServerRejectedError)
    assert result.error.status_code == status_code
    assert result.error.body == '{"error": "bad"}'


@pytest.mark.parametrize("status_code", [200, 201, 204, 299])
def test_http_2xx_is_success(status_code):
    session = mock_session(status_code=status_code)
    with HttpTransport(session=session, logger=QUIET) as transport:
        assert transport.send(ENDPOINT, make_payload()).result(timeout=5).ok


@pytest.mark.parametrize("exc", [
    requests.ConnectionError("refused"),
    requests.Timeout("slow"),
])
def test_http_request_exception_is_network_failure(exc):
    session = mock_session(side_effect=exc)
    with HttpTransport(session=session, logger=QUIET) as transport:
        result = transport.send(ENDPOINT, make_payload()).result(timeout=5)

    assert isinstance(result.error, NetworkFailureError)
    assert result.error.cause is exc


def test_http_does_not_close_borrowed_session():
    session = mock_session()
    HttpTransport(session=session, logger=QUIET).close()
    session.close.assert_not_called()


def test_http_closes_own_session():
    transport = HttpTransport(logger=QUIET)
    with mock.patch.object(transport.session, "close") as close:
        transport.close()
    close.assert_called_once()


def test_http_timeout_validated():
    with pytest.raises(ValueError):
        HttpTransport(timeout=0)
