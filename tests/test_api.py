# HTTP-level tests: reservation workflow end to end, error envelope and booking endpoints.
from fastapi.testclient import TestClient

from conftest import OTHER_USER_ID, PROPERTY_ID, booking_payload, user_headers

API = "/api/v1"


# Helper: open a reservation and walk it to CONFIRM with a three-night stay
def reservation_at_confirm(client: TestClient) -> str:
    r = client.post(f"{API}/reservations", headers=user_headers(), json={"property_id": PROPERTY_ID})
    assert r.status_code == 201, r.text
    draft_id = r.json()["data"]["draft_id"]

    r = client.put(
        f"{API}/reservations/{draft_id}/dates",
        headers=user_headers(),
        json={"check_in": "2025-06-10", "check_out": "2025-06-13"},
    )
    assert r.status_code == 200, r.text

    for _ in range(2):
        r = client.post(f"{API}/reservations/{draft_id}/next", headers=user_headers())
        assert r.status_code == 200, r.text
    assert r.json()["data"]["state"] == "CONFIRM"
    assert r.json()["data"]["total_amount"] == 6000
    return draft_id


def test_health(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_missing_user_header_is_unauthorized(client: TestClient):
    r = client.get(f"{API}/bookings")
    assert r.status_code == 401
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "unauthorized"
    assert body["message"] == "Unauthorized. Please login again."
    assert "timestamp" in body


def test_reservation_happy_path(client: TestClient, backend):
    draft_id = reservation_at_confirm(client)

    r = client.post(
        f"{API}/reservations/{draft_id}/submit",
        headers=user_headers(),
        json={"account_reference": "1234-5678-90"},
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["booking"]["booking_id"] == 101
    assert [b["booking_id"] for b in data["bookings"]["upcoming"]] == [101]

    # Session is closed after success
    r = client.get(f"{API}/reservations/{draft_id}", headers=user_headers())
    assert r.status_code == 404


def test_invalid_dates_surface_each_rule(client: TestClient):
    r = client.post(f"{API}/reservations", headers=user_headers(), json={"property_id": PROPERTY_ID})
    draft_id = r.json()["data"]["draft_id"]
    client.put(
        f"{API}/reservations/{draft_id}/dates",
        headers=user_headers(),
        json={"check_in": "2025-05-10", "check_out": "2025-05-09"},
    )

    r = client.post(f"{API}/reservations/{draft_id}/next", headers=user_headers())

    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "invalid_dates"
    assert [d["rule"] for d in body["details"]] == ["invalid_range", "past_checkin"]


def test_declined_payment_returns_to_confirm(client: TestClient, backend):
    backend.charge_result = False
    draft_id = reservation_at_confirm(client)

    r = client.post(
        f"{API}/reservations/{draft_id}/submit",
        headers=user_headers(),
        json={"account_reference": "1234567890"},
    )
    assert r.status_code == 402
    assert r.json()["error"] == "payment_failed"
    assert not backend.called("/client/makeBooking")

    r = client.get(f"{API}/reservations/{draft_id}", headers=user_headers())
    assert r.json()["data"]["state"] == "CONFIRM"
    assert r.json()["data"]["last_error"] == "Payment was declined. No booking was made."


def test_empty_account_reference_is_rejected(client: TestClient, backend):
    draft_id = reservation_at_confirm(client)

    r = client.post(f"{API}/reservations/{draft_id}/submit", headers=user_headers(), json={})

    assert r.status_code == 422
    assert not backend.called("/client/alwaysTrue")
    r = client.get(f"{API}/reservations/{draft_id}", headers=user_headers())
    assert r.json()["data"]["state"] == "CONFIRM"


def test_partial_commit_is_recorded_and_blocks_resubmission(client: TestClient, backend):
    backend.create_status = 500
    draft_id = reservation_at_confirm(client)

    r = client.post(
        f"{API}/reservations/{draft_id}/submit",
        headers=user_headers(),
        json={"account_reference": "1234567890"},
    )
    assert r.status_code == 502
    assert r.json()["error"] == "partial_commit"

    r = client.get(f"{API}/reservations/reconciliation", headers=user_headers())
    [record] = r.json()["data"]
    assert record["amount"] == 6000
    assert record["property_id"] == PROPERTY_ID

    r = client.post(
        f"{API}/reservations/{draft_id}/submit",
        headers=user_headers(),
        json={"account_reference": "1234567890"},
    )
    assert r.status_code == 409


def test_other_users_draft_is_not_found(client: TestClient):
    draft_id = reservation_at_confirm(client)
    r = client.get(f"{API}/reservations/{draft_id}", headers=user_headers(OTHER_USER_ID))
    assert r.status_code == 404


def test_abort_discards_reservation(client: TestClient):
    draft_id = reservation_at_confirm(client)

    r = client.delete(f"{API}/reservations/{draft_id}", headers=user_headers())
    assert r.status_code == 204

    r = client.get(f"{API}/reservations/{draft_id}", headers=user_headers())
    assert r.status_code == 404


def test_list_and_cancel_booking(client: TestClient, backend):
    backend.bookings = [
        booking_payload(101, "2025-06-10", "2025-06-13"),
        booking_payload(102, "2025-05-28", "2025-06-03"),
    ]

    r = client.get(f"{API}/bookings", headers=user_headers())
    assert r.status_code == 200
    overview = r.json()["data"]
    assert [b["booking_id"] for b in overview["upcoming"]] == [101]
    assert [b["booking_id"] for b in overview["current"]] == [102]
    assert overview["actionable_ids"] == [101]

    r = client.post(f"{API}/bookings/101/cancel", headers=user_headers(), json={"confirm": False})
    assert r.status_code == 422

    r = client.post(f"{API}/bookings/101/cancel", headers=user_headers(), json={"confirm": True})
    assert r.status_code == 200, r.text
    assert r.json()["data"]["upcoming"] == []

    r = client.post(f"{API}/bookings/102/cancel", headers=user_headers(), json={"confirm": True})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_booking_status"


def test_modify_booking_with_invalid_dates(client: TestClient, backend):
    backend.bookings = [booking_payload(101, "2025-06-10", "2025-06-13")]

    r = client.put(
        f"{API}/bookings/101",
        headers=user_headers(),
        json={"check_in": "2025-06-13", "check_out": "2025-06-13"},
    )

    assert r.status_code == 422
    assert backend.requests == []


def test_dashboard_and_complaints(client: TestClient, backend):
    backend.bookings = [booking_payload(101, "2025-06-10", "2025-06-13")]

    r = client.post(
        f"{API}/complaints",
        headers=user_headers(),
        json={"description": "Water leaking from the ceiling", "booking_id": 101},
    )
    assert r.status_code == 201, r.text
    assert len(r.json()["data"]["active"]) == 1

    r = client.get(f"{API}/dashboard", headers=user_headers())
    assert r.status_code == 200
    stats = r.json()["data"]["stats"]
    assert stats["upcoming_bookings"] == 1
    assert stats["active_complaints"] == 1


def test_unreadable_booking_reply_after_charge_is_partial_commit(client: TestClient, backend):
    backend.create_response = {"bookingId": 5, "isBookingStatus": "BOOKED"}
    draft_id = reservation_at_confirm(client)

    r = client.post(
        f"{API}/reservations/{draft_id}/submit",
        headers=user_headers(),
        json={"account_reference": "1234567890"},
    )
    assert r.status_code == 502
    assert r.json()["error"] == "partial_commit"

    r = client.post(
        f"{API}/reservations/{draft_id}/submit",
        headers=user_headers(),
        json={"account_reference": "1234567890"},
    )
    assert r.status_code == 409
    assert backend.calls.count(("POST", "/client/alwaysTrue")) == 1


def test_cancel_reports_success_when_reload_fails(client: TestClient, backend):
    backend.bookings = [booking_payload(101, "2025-06-10", "2025-06-13")]
    backend.booking_fetch_limit = 1

    r = client.post(f"{API}/bookings/101/cancel", headers=user_headers(), json={"confirm": True})

    assert r.status_code == 200, r.text
    assert r.json()["success"] is True
    assert r.json()["data"] is None
    assert backend.find_booking(101)["isBookingStatus"] == "CANCELLED"


def test_unknown_booking_status_is_bad_gateway(client: TestClient, backend):
    backend.bookings = [booking_payload(101, "2025-06-10", "2025-06-13", status="ON_HOLD")]

    r = client.get(f"{API}/bookings", headers=user_headers())

    assert r.status_code == 502
    assert r.json()["success"] is False
