# Rental backend adapter: envelope unwrapping, wire-format parsing and error mapping.
from datetime import date

import httpx
import pytest

from stayflow.core.exceptions import (
    AuthorizationError,
    ConflictError,
    ConnectivityError,
    NotFoundError,
    RemoteServiceError,
    ServerError,
)
from stayflow.domain.booking_state import BookingStatus
from stayflow.gateways.base import error_for_status
from stayflow.gateways.rental_api import RentalApiClient

from conftest import PROPERTY_ID, USER_ID, booking_payload


# Helper: client whose every request gets the same canned response
def client_returning(settings, response=None, exc=None) -> RentalApiClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if exc is not None:
            raise exc
        return response

    return RentalApiClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "status_code,expected",
    [
        (0, ConnectivityError),
        (401, AuthorizationError),
        (403, AuthorizationError),
        (404, NotFoundError),
        (409, ConflictError),
        (500, ServerError),
        (503, ServerError),
        (400, RemoteServiceError),
    ],
)
def test_error_for_status(status_code, expected):
    assert isinstance(error_for_status(status_code, "msg"), expected)


def test_unknown_client_error_keeps_server_message():
    exc = error_for_status(418, "Teapot says no")
    assert exc.detail == "Teapot says no"
    assert exc.remote_status == 418


@pytest.mark.asyncio
async def test_bookings_parsed_from_camel_case(rental_client, backend):
    backend.bookings = [
        {
            "bookingId": 5,
            "propertyId": PROPERTY_ID,
            "userId": USER_ID,
            "checkinDate": "2025-06-10T00:00:00.000+00:00",
            "checkoutDate": "2025-06-13",
            "isPaymentStatus": True,
            "isBookingStatus": "confirmed",
            "hasExtraCot": True,
            "hasDeepClean": False,
        }
    ]

    [booking] = await rental_client.fetch_bookings(USER_ID)

    assert booking.check_in == date(2025, 6, 10)
    assert booking.status == BookingStatus.CONFIRMED
    assert booking.extra_bedding is True


@pytest.mark.asyncio
async def test_fetch_property(rental_client):
    prop = await rental_client.fetch_property(PROPERTY_ID)
    assert prop.nightly_rate == 2000
    assert prop.location == "Lahore, Punjab"


@pytest.mark.asyncio
async def test_missing_property_is_not_found(rental_client):
    with pytest.raises(NotFoundError) as exc_info:
        await rental_client.fetch_property(999)
    assert exc_info.value.detail == "Property not found"


@pytest.mark.asyncio
async def test_unsuccessful_envelope_is_remote_error(settings):
    client = client_returning(
        settings, httpx.Response(200, json={"success": False, "message": "Booking is locked"})
    )
    with pytest.raises(RemoteServiceError) as exc_info:
        await client.fetch_bookings(USER_ID)
    assert exc_info.value.detail == "Booking is locked"


@pytest.mark.asyncio
async def test_unknown_booking_status_is_remote_error(rental_client, backend):
    backend.bookings = [{**booking_payload(5, "2025-06-10", "2025-06-13"), "isBookingStatus": "ON_HOLD"}]

    with pytest.raises(RemoteServiceError) as exc_info:
        await rental_client.fetch_bookings(USER_ID)
    assert exc_info.value.detail == "Malformed response from server"


@pytest.mark.asyncio
async def test_booking_missing_dates_is_remote_error(settings):
    client = client_returning(
        settings, httpx.Response(200, json={"success": True, "data": [{"bookingId": 5, "userId": USER_ID}]})
    )
    with pytest.raises(RemoteServiceError):
        await client.fetch_bookings(USER_ID)


@pytest.mark.asyncio
async def test_transport_failure_is_connectivity_error(settings):
    client = client_returning(settings, exc=httpx.ConnectError("connection refused"))
    with pytest.raises(ConnectivityError) as exc_info:
        await client.fetch_bookings(USER_ID)
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_timeout_is_connectivity_error(settings):
    client = client_returning(settings, exc=httpx.ReadTimeout("timed out"))
    with pytest.raises(ConnectivityError):
        await client.cancel_booking(5)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body,settled",
    [
        (True, True),
        (False, False),
        ({"success": True, "message": "OK", "data": True}, True),
        ({"success": True, "message": "OK", "data": False}, False),
        ({"success": False, "message": "Declined"}, False),
    ],
)
async def test_charge_accepts_bare_boolean_or_envelope(settings, body, settled):
    client = client_returning(settings, httpx.Response(200, json=body))
    assert await client.charge(USER_ID, "1234567890", 6000, "key") is settled
