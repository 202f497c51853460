"""Tests for enrichment fields and event schemas."""

import pytest

from pulse_analytics import (
    CONCRETE_FIELDS,
    EnrichmentField,
    EventEnvelope,
    Payload,
    SendResult,
    ServerRejectedError,
    expand_fields,
)
from pulse_analytics.schemas import coerce_field


def test_field_keys():
    assert [f.key for f in CONCRETE_FIELDS] == [
        "platform", "country", "language", "device_type",
        "app_version", "os_name", "os_version",
    ]


def test_all_has_no_key():
    with pytest.raises(ValueError):
        EnrichmentField.ALL.key


def test_concrete_fields_exclude_all():
    assert EnrichmentField.ALL not in CONCRETE_FIELDS
    assert set(CONCRETE_FIELDS) == set(EnrichmentField) - {EnrichmentField.ALL}


def test_expand_all():
    assert expand_fields([EnrichmentField.ALL]) == CONCRETE_FIELDS
    assert expand_fields(["os_name", "all", "os_name"]) == CONCRETE_FIELDS


def test_expand_dedupes_in_order():
    assert expand_fields(["os_version", EnrichmentField.PLATFORM, "os_version"]) == (
        EnrichmentField.OS_VERSION,
        EnrichmentField.PLATFORM,
    )


def test_expand_empty():
    assert expand_fields([]) == ()


def test_coerce_unknown_field():
    with pytest.raises(ValueError, match="Unknown enrichment field"):
        coerce_field("deviceType")


def test_envelope_minimal():
    assert EventEnvelope(user_id="u1", event_type="e").to_dict() == {
        "user_id": "u1",
        "event_type": "e",
    }


def test_envelope_full():
    envelope = EventEnvelope(
        user_id="u1",
        event_type="e",
        session_id="s1",
        user_properties={"plan": "pro"},
        event_properties={"n": 1},
        enrichment={"platform": "Linux", "os_name": "Linux"},
    )
    assert envelope.to_dict() == {
        "user_id": "u1",
        "event_type": "e",
        "session_id": "s1",
        "user_properties": {"plan": "pro"},
        "event_properties": {"n": 1},
        "platform": "Linux",
        "os_name": "Linux",
    }


def test_envelope_rejects_all_key():
    with pytest.raises(ValueError):
        EventEnvelope(user_id="u1", event_type="e", enrichment={"all": "x"})


def test_payload_requires_an_event():
    with pytest.raises(ValueError):
        Payload(api_key="KEY", events=[])


def test_payload_emits_null_api_key():
    payload = Payload(api_key=None, events=[EventEnvelope(user_id="u1", event_type="e")])
    assert payload.to_dict() == {
        "api_key": None,
        "events": [{"user_id": "u1", "event_type": "e"}],
    }
    assert payload.event_count == 1


def test_send_result_ok():
    payload = Payload(api_key=None, events=[EventEnvelope(user_id="u1", event_type="e")])
    assert SendResult(payload=payload).ok
    assert not SendResult(payload=payload, error=ServerRejectedError(500)).ok
