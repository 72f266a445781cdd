import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch

import requests

from app.main import app
from app.services.formatter import UNKNOWN_REQUEST

DATE = "2026-03-02"


@pytest.fixture
def client(booking_service):
    app.state.booking_service = booking_service
    yield TestClient(app)
    app.state.booking_service = None


def vapi_tool_calls(*calls):
    return {
        "message": {
            "type": "tool-calls",
            "toolCalls": [
                {"id": call_id, "type": "function", "function": {"name": name, "arguments": args}}
                for call_id, name, args in calls
            ],
        }
    }


def test_vapi_batch_echoes_tool_call_ids(client):
    payload = vapi_tool_calls(
        ("call_a", "check_availability", {"date": DATE, "doctor": "sara"}),
        ("call_b", "book_appointment", {"patient_name": "Jane", "doctor": "Ahmed", "date": DATE, "time": "10:00 AM"}),
        ("call_c", "transfer_call", {}),
    )
    response = client.post("/api/webhook", json=payload)

    assert response.status_code == 200
    results = response.json()["results"]
    assert [r["toolCallId"] for r in results] == ["call_a", "call_b", "call_c"]
    assert results[0]["result"].startswith("On Monday, March 2 we have: Dr. Sara Malik at")
    assert "was just taken" in results[1]["result"]
    assert results[2]["result"] == UNKNOWN_REQUEST


def test_vapi_string_arguments(client):
    payload = vapi_tool_calls(("call_x", "check_availability", '{"date": "2026-03-02", "doctor": "Dr. Unknown"}'))
    response = client.post("/api/webhook", json=payload)
    assert "Dr. Ahmed Khan, Dr. Sara Malik" in response.json()["results"][0]["result"]


def test_vapi_assistant_request(client):
    response = client.post("/api/webhook", json={"message": {"type": "assistant-request", "call": {"id": "c1"}}})
    assert response.status_code == 200
    assistant = response.json()["assistant"]
    assert assistant["name"] == "Sarah"


def test_vapi_lifecycle_is_acknowledged(client):
    payload = {"message": {"type": "end-of-call-report", "call": {"id": "c1"}, "durationSeconds": 42}}
    response = client.post("/api/webhook", json=payload)
    assert response.status_code == 200
    assert response.json() == {}


def test_vapi_missing_envelope_is_rejected(client):
    assert client.post("/api/webhook", json={"foo": "bar"}).status_code == 400
    assert client.post("/api/webhook", content=b"", headers={"content-type": "application/json"}).status_code == 400


def test_retell_tool_call(client, store):
    payload = {
        "name": "book_appointment",
        "tool_call_id": "tc_1",
        "arguments": {"patient_name": "Jane", "doctor": "Sara", "date": DATE, "time": "10:00 AM"},
    }
    response = client.post("/webhook/retell", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["tool_call_id"] == "tc_1"
    assert data["content"].startswith("Your appointment is confirmed! Jane")
    assert store.appointments[-1].doctor == "Sara"


def test_retell_store_failure_is_spoken(client, store):
    store.fail = True
    response = client.post("/webhook/retell", json={"name": "check_availability", "tool_call_id": "tc_2", "arguments": {"date": DATE}})
    assert response.status_code == 200
    assert "technical issue" in response.json()["content"]


def test_retell_lifecycle_events(client):
    for event in ("call_started", "call_ended", "call_analyzed"):
        response = client.post("/webhook/retell", json={"event": event, "call": {"call_id": "c9", "duration_ms": 65400}})
        assert response.status_code == 200
        assert response.json() == {"received": True}


def test_retell_empty_body_is_rejected(client):
    assert client.post("/webhook/retell", json={}).status_code == 400


def test_webhook_secret_enforced(client):
    with patch("app.core.security.settings.WEBHOOK_SECRET", "s3cret"):
        payload = vapi_tool_calls(("call_a", "check_availability", {"date": DATE}))
        assert client.post("/api/webhook", json=payload).status_code == 403
        response = client.post("/api/webhook", json=payload, headers={"x-vapi-secret": "s3cret"})
        assert response.status_code == 200


def test_tool_routes(client):
    response = client.post("/tools/check_availability", json={"date": DATE})
    assert response.status_code == 200
    assert "Dr. Ahmed Khan at 09:00 AM, 11:00 AM" in response.json()["result"]

    response = client.post("/tools/book_appointment", json={"patient_name": "Jane", "date": DATE})
    assert "Could you provide those details?" in response.json()["result"]


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
    assert client.get("/").json()["status"] == "running"


def test_start_call(client):
    ok = MagicMock()
    ok.json.return_value = {"access_token": "tok_123"}
    with patch("app.api.calls.settings.RETELL_API_KEY", "key"), \
         patch("app.api.calls.settings.RETELL_AGENT_ID", "agent"), \
         patch("app.api.calls.requests.post", return_value=ok) as mock_post:
        response = client.post("/start-call")
        assert response.status_code == 200
        assert response.json() == {"accessToken": "tok_123"}
        assert mock_post.call_args.kwargs["json"] == {"agent_id": "agent"}

    with patch("app.api.calls.settings.RETELL_API_KEY", "key"), \
         patch("app.api.calls.settings.RETELL_AGENT_ID", "agent"), \
         patch("app.api.calls.requests.post", side_effect=requests.ConnectionError("down")):
        response = client.post("/start-call")
        assert response.status_code == 500


def test_start_call_preflight_from_other_origin(client):
    response = client.options(
        "/start-call",
        headers={
            "Origin": "https://demo.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


@pytest.mark.parametrize("duration_ms", ["65400", "n/a", None, 65400.5])
def test_retell_lifecycle_tolerates_odd_durations(client, duration_ms):
    payload = {"event": "call_ended", "call": {"call_id": "c9", "duration_ms": duration_ms}}
    response = client.post("/webhook/retell", json=payload)
    assert response.status_code == 200
    assert response.json() == {"received": True}
