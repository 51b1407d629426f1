"""
Tests for the widget session HTTP surface, backed by the in-memory booking API.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest
from fastapi.testclient import TestClient

from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.infrastructure.booking_api.booking_api_client import BookingApiClient
from booking_widget.infrastructure.booking_api.mock_booking_api import MockBookingApi
from booking_widget.infrastructure.clock.system_clock import FixedClock
from booking_widget.infrastructure.store.memory_store import MemoryWidgetSessionStore
from booking_widget.main import app
from booking_widget.wiring import dependencies

TZ = ZoneInfo("Australia/Sydney")

DETAILS = {
    "patientFirstName": "Ada",
    "patientLastName": "Lovelace",
    "patientPhone": "0412345678",
    "patientEmail": "ada@example.com",
    "referrerName": "Dr Babbage",
    "referralReason": "Medication review",
}


@pytest.fixture
def api(monkeypatch) -> MockBookingApi:
    mock_api = MockBookingApi(
        windows=[AvailabilityWindow(id=1, day_of_week=0, start_time="09:00", end_time="12:00")],
        timezone=TZ,
    )
    monkeypatch.setattr(dependencies, "_booking_api", mock_api)
    monkeypatch.setattr(dependencies, "_session_store", MemoryWidgetSessionStore())
    monkeypatch.setattr(dependencies, "get_clock", lambda: FixedClock(datetime(2026, 10, 16, 10, 0, tzinfo=TZ)))
    return mock_api


@pytest.fixture
def client(api) -> TestClient:
    return TestClient(app)


def _create(client: TestClient) -> str:
    resp = client.post("/widget/sessions", json={"providerId": 7})
    assert resp.status_code == 201
    body = resp.json()
    assert body["step"] == "date"
    assert body["error"] is None
    return body["session_id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_shutdown_closes_booking_api_client(monkeypatch):
    booking_api = BookingApiClient(
        base_url="http://booking.test/api",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])),
    )
    monkeypatch.setattr(dependencies, "_booking_api", booking_api)

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert not booking_api.is_closed

    assert booking_api.is_closed
    assert dependencies._booking_api is None


def test_full_booking_cycle(client, api):
    session_id = _create(client)

    dates = client.get(f"/widget/sessions/{session_id}/dates", params={"days": 7}).json()
    assert [d["date"] for d in dates if d["enabled"]] == ["2026-10-19"]

    state = client.post(f"/widget/sessions/{session_id}/date", json={"date": "2026-10-19"}).json()
    assert state["step"] == "time"
    assert [s["time"] for s in state["time_slots"]] == ["09:00", "10:00", "11:00"]
    assert state["time_slots"][1]["label"] == "10:00 AM"

    state = client.post(f"/widget/sessions/{session_id}/time", json={"time": "10:00"}).json()
    assert state["step"] == "details"
    assert state["selected_time"] == "10:00"

    state = client.post(f"/widget/sessions/{session_id}/submit", json=DETAILS).json()
    assert state["step"] == "success"
    assert len(api.bookings) == 1
    assert api.bookings[0].referral_reason == "Medication review"

    state = client.post(f"/widget/sessions/{session_id}/reset").json()
    assert state["step"] == "date"
    assert state["selected_date"] is None
    assert state["selected_time"] is None


def test_unavailable_date_leaves_state_unchanged(client):
    session_id = _create(client)
    state = client.post(f"/widget/sessions/{session_id}/date", json={"date": "2026-10-20"}).json()
    assert state["step"] == "date"
    assert state["selected_date"] is None


def test_invalid_details_return_field_errors(client, api):
    session_id = _create(client)
    client.post(f"/widget/sessions/{session_id}/date", json={"date": "2026-10-19"})
    client.post(f"/widget/sessions/{session_id}/time", json={"time": "09:00"})

    state = client.post(f"/widget/sessions/{session_id}/submit", json={**DETAILS, "patientFirstName": ""}).json()
    assert state["step"] == "details"
    assert state["field_errors"] == {"patientFirstName": "First name is required"}
    assert api.bookings == []


def test_back_and_delete(client):
    session_id = _create(client)
    client.post(f"/widget/sessions/{session_id}/date", json={"date": "2026-10-19"})
    state = client.post(f"/widget/sessions/{session_id}/back").json()
    assert state["step"] == "date"

    assert client.delete(f"/widget/sessions/{session_id}").status_code == 204
    assert client.get(f"/widget/sessions/{session_id}").status_code == 404


def test_unknown_session_and_bad_body(client):
    assert client.post("/widget/sessions/missing/back").status_code == 404
    session_id = _create(client)
    assert client.post(f"/widget/sessions/{session_id}/date", json={"date": "not-a-date"}).status_code == 422
