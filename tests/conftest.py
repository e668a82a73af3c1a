# Pytest configuration for StayFlow tests.
# Serves a fake rental backend through httpx.MockTransport and freezes "now" at 2025-06-01.
import json
from collections.abc import Iterator
from datetime import UTC, datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from stayflow.config import Settings
from stayflow.core.idempotency import InFlightRegistry
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.main import create_application
from stayflow.schemas.booking import Booking
from stayflow.services.booking_service import BookingService
from stayflow.services.payment_orchestrator import PaymentOrchestrator
from stayflow.services.reconciliation_service import ReconciliationLedger

BACKEND_URL = "http://backend.test/v1/api"
BACKEND_PREFIX = "/v1/api"

USER_ID = 1
OTHER_USER_ID = 2
PROPERTY_ID = 7
NIGHTLY_RATE = 2000

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return NOW


# Helper: booking as the backend sends it (camelCase)
def booking_payload(
    booking_id: int,
    check_in: str,
    check_out: str,
    status: str = "CONFIRMED",
    user_id: int = USER_ID,
    property_id: int = PROPERTY_ID,
) -> dict:
    return {
        "bookingId": booking_id,
        "propertyId": property_id,
        "userId": user_id,
        "checkinDate": check_in,
        "checkoutDate": check_out,
        "isPaymentStatus": True,
        "isBookingStatus": status,
        "hasExtraCot": False,
        "hasDeepClean": False,
        "propertyName": "Lakeside Cabin",
    }


# Helper: parsed Booking for pure classification tests
def make_booking(booking_id: int, check_in: str, check_out: str, status: str = "CONFIRMED", **kwargs) -> Booking:
    return Booking.model_validate(booking_payload(booking_id, check_in, check_out, status, **kwargs))


# Helper: complaint as the backend sends it
def complaint_payload(complaint_id: int, created: str, status: str = "PENDING", user_id: int = USER_ID) -> dict:
    return {
        "complaintId": complaint_id,
        "userId": user_id,
        "bookingId": None,
        "complaintDescription": "The heating did not work at all",
        "complaintType": "PROPERTY",
        "complaintStatus": status,
        "complaintDate": created,
    }


def _envelope(data, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"success": True, "message": "OK", "data": data})


class FakeRentalBackend:
    """In-memory rental backend; records every request it receives."""

    def __init__(self):
        self.bookings: list[dict] = []
        self.complaints: list[dict] = []
        self.properties: dict[int, dict] = {
            PROPERTY_ID: {
                "propertyId": PROPERTY_ID,
                "propertyName": "Lakeside Cabin",
                "pricePerDay": NIGHTLY_RATE,
                "maxNoOfGuests": 4,
                "city": "Lahore",
                "state": "Punjab",
                "country": "Pakistan",
                "hostId": 9,
                "propertyStatus": "APPROVED",
            }
        }
        self.requests: list[httpx.Request] = []
        self.charge_result = True
        # Non-200 makes the charge call itself fail with that status
        self.charge_status = 200
        # Non-200 makes booking creation fail with that status
        self.create_status = 200
        # Replaces the created booking in the makeBooking reply when set
        self.create_response: dict | None = None
        # After this many booking fetches, further fetches answer 503
        self.booking_fetch_limit: int | None = None
        # Non-200 makes complaint listing fail with that status
        self.complaints_status = 200
        self.ratings: list[dict] = []
        self._next_booking_id = 100

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path.removeprefix(BACKEND_PREFIX)) for r in self.requests]

    def called(self, path_prefix: str) -> bool:
        return any(path.startswith(path_prefix) for _, path in self.calls)

    def find_booking(self, booking_id: int) -> dict | None:
        return next((b for b in self.bookings if b["bookingId"] == booking_id), None)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(BACKEND_PREFIX)
        body = json.loads(request.content) if request.content else None

        if request.method == "GET" and path.startswith("/client/viewBooking/"):
            fetches = sum(1 for _, p in self.calls if p.startswith("/client/viewBooking/"))
            if self.booking_fetch_limit is not None and fetches > self.booking_fetch_limit:
                return httpx.Response(503, json={"success": False, "message": "Booking service unavailable"})
            user_id = int(path.rsplit("/", 1)[1])
            return _envelope([b for b in self.bookings if b["userId"] == user_id])

        if request.method == "GET" and path.startswith("/client/viewClickedProperty/"):
            prop = self.properties.get(int(path.rsplit("/", 1)[1]))
            if prop is None:
                return httpx.Response(404, json={"success": False, "message": "Property not found"})
            return _envelope(prop)

        if request.method == "POST" and path == "/client/alwaysTrue":
            if self.charge_status != 200:
                return httpx.Response(self.charge_status, json={"success": False, "message": "Payment service error"})
            return httpx.Response(200, json=self.charge_result)

        if request.method == "POST" and path == "/client/makeBooking":
            if self.create_status != 200:
                return httpx.Response(
                    self.create_status,
                    json={"success": False, "message": "Booking service unavailable"},
                )
            self._next_booking_id += 1
            created = {**body, "bookingId": self._next_booking_id, "isBookingStatus": "CONFIRMED", "isPaymentStatus": True}
            self.bookings.append(created)
            if self.create_response is not None:
                return _envelope(self.create_response)
            return _envelope(created)

        if request.method == "DELETE" and path.startswith("/client/cancelBooking/"):
            booking = self.find_booking(int(path.rsplit("/", 1)[1]))
            if booking is None:
                return httpx.Response(404, json={"success": False, "message": "Booking not found"})
            booking["isBookingStatus"] = "CANCELLED"
            return _envelope(None)

        if request.method == "PUT" and path == "/client/modifyBooking":
            booking = self.find_booking(body["bookingId"])
            booking.update(body)
            return _envelope(booking)

        if request.method == "GET" and path.startswith("/user/viewComplaints/"):
            if self.complaints_status != 200:
                return httpx.Response(self.complaints_status, json={"success": False, "message": "Complaint service unavailable"})
            user_id = int(path.rsplit("/", 1)[1])
            return _envelope([c for c in self.complaints if c["userId"] == user_id])

        if request.method == "POST" and path == "/client/addComplaintForBooking":
            created = {
                **body,
                "complaintId": len(self.complaints) + 1,
                "complaintStatus": "PENDING",
                "complaintDate": "2025-06-01T12:00:00",
            }
            self.complaints.append(created)
            return _envelope(created)

        if request.method == "POST" and path == "/admin/closeBookingAndRating":
            self.ratings.append(body)
            return _envelope(None)

        return httpx.Response(404, json={"success": False, "message": f"No route {path}"})


@pytest.fixture()
def backend() -> FakeRentalBackend:
    return FakeRentalBackend()


@pytest.fixture()
def settings() -> Settings:
    return Settings(backend_base_url=BACKEND_URL)


@pytest.fixture()
def rental_client(backend: FakeRentalBackend, settings: Settings) -> RentalApiClient:
    """RentalApiClient wired to the fake backend."""
    return RentalApiClient(settings, transport=httpx.MockTransport(backend.handler))


@pytest.fixture()
def booking_service(rental_client: RentalApiClient) -> BookingService:
    return BookingService(rental_client, clock=fixed_clock)


@pytest.fixture()
def in_flight() -> InFlightRegistry:
    return InFlightRegistry()


@pytest.fixture()
def ledger() -> ReconciliationLedger:
    return ReconciliationLedger()


@pytest.fixture()
def orchestrator(rental_client: RentalApiClient, ledger: ReconciliationLedger) -> PaymentOrchestrator:
    return PaymentOrchestrator(rental_client, ledger)


@pytest.fixture()
def client(backend: FakeRentalBackend, settings: Settings) -> Iterator[TestClient]:
    """
    FastAPI TestClient bound to an application talking to the fake backend.
    """
    app = create_application(
        settings=settings,
        transport=httpx.MockTransport(backend.handler),
        clock=fixed_clock,
    )
    with TestClient(app) as c:
        yield c


# Convenience header for requests on behalf of a user
def user_headers(user_id: int = USER_ID) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}
