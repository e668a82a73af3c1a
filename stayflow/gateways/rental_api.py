"""Rental backend adapter.

One method per consumed remote operation. Routes come from settings so the
client can follow the backend without code changes.
"""

import logging
from datetime import date
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError as SchemaValidationError

from stayflow.config import Settings, settings as default_settings
from stayflow.core.exceptions import NotFoundError, RemoteServiceError
from stayflow.gateways.base import HttpGateway
from stayflow.schemas.booking import Booking
from stayflow.schemas.complaint import Complaint, ComplaintCreate
from stayflow.schemas.property import Property

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _iso(value: date) -> str:
    return value.isoformat()


def _parse(model: type[ModelT], data: Any) -> ModelT:
    """Validate a backend record, reporting bad payloads as a remote failure."""
    try:
        return model.model_validate(data)
    except SchemaValidationError as exc:
        logger.warning("Unreadable %s from rental backend: %s", model.__name__, exc)
        raise RemoteServiceError("Malformed response from server") from exc


class RentalApiClient(HttpGateway):
    """Async client for the rental backend."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        super().__init__(
            base_url=self.settings.backend_base_url,
            timeout=self.settings.request_timeout,
            transport=transport,
        )

    async def fetch_bookings(self, user_id: int) -> list[Booking]:
        """All bookings owned by a user."""
        data = await self._request("GET", self.settings.bookings_path.format(user_id=user_id))
        return [_parse(Booking, item) for item in data or []]

    async def fetch_property(self, property_id: int) -> Property:
        """Bookable details (nightly rate, capacity) of a property."""
        data = await self._request(
            "GET", self.settings.property_path.format(property_id=property_id)
        )
        if not data:
            raise NotFoundError("Property", str(property_id))
        return _parse(Property, data)

    async def charge(
        self,
        owner_id: int,
        account_reference: str,
        amount: int,
        idempotency_key: str,
    ) -> bool:
        """Submit a charge and return whether it settled.

        The payment endpoint answers with a bare boolean; an envelope is
        accepted too, with ``data`` (or ``success`` when data is absent) as
        the settlement result.
        """
        body = await self._send(
            "POST",
            self.settings.charge_path,
            json={
                "userId": owner_id,
                "accountNumber": account_reference,
                "amount": amount,
            },
            headers={"Idempotency-Key": idempotency_key},
        )
        if isinstance(body, dict):
            data = body.get("data")
            return bool(body.get("success")) if data is None else bool(data)
        return body is True

    async def create_booking(
        self,
        property_id: int,
        user_id: int,
        check_in: date,
        check_out: date,
        extra_bedding: bool,
        deep_clean: bool,
        idempotency_key: str,
    ) -> Booking:
        """Create a booking for an already settled charge."""
        payload = {
            "propertyId": property_id,
            "userId": user_id,
            "checkinDate": _iso(check_in),
            "checkoutDate": _iso(check_out),
            "hasExtraCot": extra_bedding,
            "hasDeepClean": deep_clean,
        }
        data = await self._request(
            "POST",
            self.settings.create_booking_path,
            json=payload,
            headers={"Idempotency-Key": idempotency_key},
        )
        if isinstance(data, dict):
            return _parse(Booking, {**payload, "isPaymentStatus": True, **data})
        # Backend acknowledged without echoing the record
        return _parse(Booking, {**payload, "isPaymentStatus": True})

    async def cancel_booking(self, booking_id: int) -> None:
        await self._request(
            "DELETE", self.settings.cancel_booking_path.format(booking_id=booking_id)
        )

    async def modify_booking(
        self,
        booking_id: int,
        check_in: date,
        check_out: date,
        extra_bedding: bool,
        deep_clean: bool,
    ) -> None:
        """Replace a booking's dates and add-ons.

        The backend marks this endpoint provisional; it is sent as a full
        replacement of every modifiable field.
        """
        await self._request(
            "PUT",
            self.settings.modify_booking_path,
            json={
                "bookingId": booking_id,
                "checkinDate": _iso(check_in),
                "checkoutDate": _iso(check_out),
                "hasExtraCot": extra_bedding,
                "hasDeepClean": deep_clean,
            },
        )

    async def fetch_complaints(self, user_id: int) -> list[Complaint]:
        data = await self._request("GET", self.settings.complaints_path.format(user_id=user_id))
        return [_parse(Complaint, item) for item in data or []]

    async def submit_complaint(self, user_id: int, complaint: ComplaintCreate) -> Complaint | None:
        data = await self._request(
            "POST",
            self.settings.submit_complaint_path,
            json={
                "userId": user_id,
                "bookingId": complaint.booking_id,
                "complaintDescription": complaint.description,
                "complaintType": complaint.complaint_type.value,
            },
        )
        if isinstance(data, dict):
            return _parse(Complaint, data)
        return None

    async def submit_rating(self, booking_id: int, rating: float) -> None:
        """Rate a finished stay; the backend closes the booking."""
        await self._request(
            "POST",
            self.settings.rating_path,
            json={"bookingId": booking_id, "rating": rating},
        )
