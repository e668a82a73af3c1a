"""Cancellation and modification of existing bookings.

Both managers:
- act only on bookings owned by the acting user that are still actionable
  (confirmed, stay not started)
- hold a per-user, per-booking in-flight guard around the remote calls, so
  one booking never has two mutations outstanding
- rebuild the booking lists from the backend after success instead of
  patching local state; a failed rebuild yields None, not an error
"""

import logging

from stayflow.core.exceptions import InvalidBookingStatus, ValidationError
from stayflow.core.idempotency import InFlightRegistry
from stayflow.domain import date_rules
from stayflow.domain.booking_state import BookingStatus, assert_booking_transition
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.booking import Booking, BookingModifyForm, BookingModifyRequest, BookingOverview
from stayflow.services.booking_service import BookingService
from stayflow.utils.clock import Clock, now as current_time

logger = logging.getLogger(__name__)

IN_PROGRESS_DETAIL = "Another change to this booking is still in progress"


def booking_key(user_id: int, booking_id: int) -> str:
    """In-flight guard key shared by every mutation of one user's booking."""
    return f"booking:{user_id}:{booking_id}"


class _BookingMutation:
    def __init__(
        self,
        client: RentalApiClient,
        booking_service: BookingService,
        in_flight: InFlightRegistry,
        clock: Clock = current_time,
    ):
        self.client = client
        self.booking_service = booking_service
        self.in_flight = in_flight
        self.clock = clock

    async def _actionable_booking(self, user_id: int, booking_id: int, action: str) -> Booking:
        bookings = await self.booking_service.fetch(user_id)
        booking = self.booking_service.find_owned(bookings, user_id, booking_id)
        if not self.booking_service.classifier.is_actionable(booking, self.clock()):
            raise InvalidBookingStatus(
                f"Only confirmed bookings that have not started can be {action}"
            )
        return booking


class CancellationManager(_BookingMutation):
    """Cancels bookings after explicit confirmation."""

    async def cancel(self, user_id: int, booking_id: int, confirmed: bool) -> BookingOverview | None:
        """Cancel a booking and return the rebuilt booking lists.

        Args:
            user_id: Acting user
            booking_id: Booking to cancel
            confirmed: The user's explicit confirmation

        Returns:
            The rebuilt lists, or None if only the reload failed

        Raises:
            ValidationError: Not confirmed
            ConflictError: A change to this booking is already in progress
            InvalidBookingStatus: Booking is no longer actionable
        """
        if not confirmed:
            raise ValidationError("Please confirm that you want to cancel this booking")

        with self.in_flight.claim(booking_key(user_id, booking_id), IN_PROGRESS_DETAIL):
            booking = await self._actionable_booking(user_id, booking_id, "cancelled")
            assert_booking_transition(booking.status, BookingStatus.CANCELLED)

            await self.client.cancel_booking(booking_id)
            logger.info("Booking %s cancelled by user %s", booking_id, user_id)

        return await self.booking_service.reload_after(user_id, f"cancelling booking {booking_id}")


class ModificationManager(_BookingMutation):
    """Replaces the dates and add-ons of a booking."""

    async def prefill(self, user_id: int, booking_id: int) -> BookingModifyForm:
        """Modification form populated from the existing booking."""
        booking = await self._actionable_booking(user_id, booking_id, "modified")
        return BookingModifyForm(
            booking_id=booking_id,
            property_id=booking.property_id,
            check_in=booking.check_in,
            check_out=booking.check_out,
            extra_bedding=booking.extra_bedding,
            deep_clean=booking.deep_clean,
            nights=date_rules.nights(booking.check_in, booking.check_out),
        )

    async def modify(
        self, user_id: int, booking_id: int, request: BookingModifyRequest
    ) -> BookingOverview | None:
        """Submit new dates/add-ons and return the rebuilt booking lists.

        The date rules used at creation run first; an invalid range never
        reaches the network.

        Raises:
            DateRangeError: New dates break a rule
            ConflictError: A change to this booking is already in progress
            InvalidBookingStatus: Booking is no longer actionable
        """
        date_rules.validate(request.check_in, request.check_out, self.clock()).raise_for_violations()

        with self.in_flight.claim(booking_key(user_id, booking_id), IN_PROGRESS_DETAIL):
            await self._actionable_booking(user_id, booking_id, "modified")

            await self.client.modify_booking(
                booking_id,
                check_in=request.check_in,
                check_out=request.check_out,
                extra_bedding=request.extra_bedding,
                deep_clean=request.deep_clean,
            )
            logger.info(
                "Booking %s modified by user %s to %s - %s",
                booking_id,
                user_id,
                request.check_in,
                request.check_out,
            )

        return await self.booking_service.reload_after(user_id, f"modifying booking {booking_id}")
