"""Post-stay ratings."""

import logging

from stayflow.core.exceptions import InvalidBookingStatus
from stayflow.core.idempotency import InFlightRegistry
from stayflow.domain.booking_state import BookingStatus
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.booking import BookingOverview
from stayflow.schemas.review import ReviewCreate
from stayflow.services.booking_management_service import IN_PROGRESS_DETAIL, booking_key
from stayflow.services.booking_service import BookingService

logger = logging.getLogger(__name__)


class ReviewService:
    """Submits ratings for completed stays."""

    def __init__(
        self,
        client: RentalApiClient,
        booking_service: BookingService,
        in_flight: InFlightRegistry,
    ):
        self.client = client
        self.booking_service = booking_service
        self.in_flight = in_flight

    async def submit(self, user_id: int, booking_id: int, review: ReviewCreate) -> BookingOverview | None:
        """Rate a completed booking and return the rebuilt booking lists."""
        with self.in_flight.claim(booking_key(user_id, booking_id), IN_PROGRESS_DETAIL):
            bookings = await self.booking_service.fetch(user_id)
            booking = self.booking_service.find_owned(bookings, user_id, booking_id)
            if booking.status != BookingStatus.COMPLETED:
                raise InvalidBookingStatus("Only completed bookings can be reviewed")

            await self.client.submit_rating(booking_id, review.rating)
            logger.info("User %s rated booking %s: %s", user_id, booking_id, review.rating)

        return await self.booking_service.reload_after(user_id, f"rating booking {booking_id}")
