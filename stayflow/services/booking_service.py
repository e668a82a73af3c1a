"""Booking reads and the classified booking overview."""

import logging
from collections.abc import Sequence
from datetime import datetime

from stayflow.config import settings
from stayflow.core.exceptions import AppException, AuthorizationError, NotFoundError
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.booking import Booking, BookingOverview
from stayflow.services.booking_classifier import BookingClassifier, booking_classifier
from stayflow.utils.clock import Clock, now as current_time

logger = logging.getLogger(__name__)


class BookingService:
    """Fetches a user's bookings and rebuilds the classified views."""

    def __init__(
        self,
        client: RentalApiClient,
        clock: Clock = current_time,
        classifier: BookingClassifier = booking_classifier,
        recent_limit: int | None = None,
    ):
        self.client = client
        self.clock = clock
        self.classifier = classifier
        self.recent_limit = recent_limit or settings.recent_bookings_limit

    async def fetch(self, user_id: int) -> list[Booking]:
        """Fresh, fully materialized list of the user's bookings."""
        return await self.client.fetch_bookings(user_id)

    def overview(self, bookings: Sequence[Booking], now: datetime) -> BookingOverview:
        """Classify bookings against a single now snapshot."""
        buckets = self.classifier.classify(bookings, now)
        return BookingOverview(
            generated_at=now,
            upcoming=list(buckets.upcoming),
            current=list(buckets.current),
            past=list(buckets.past),
            recent=self.classifier.recent(bookings, self.recent_limit),
            actionable_ids=[
                b.booking_id
                for b in bookings
                if b.booking_id is not None and self.classifier.is_actionable(b, now)
            ],
        )

    async def load_overview(self, user_id: int) -> BookingOverview:
        """Re-fetch and reclassify; used after every mutation."""
        bookings = await self.fetch(user_id)
        overview = self.overview(bookings, self.clock())
        logger.debug(
            "Reloaded %d bookings for user %s (%d upcoming, %d current, %d past)",
            len(bookings),
            user_id,
            len(overview.upcoming),
            len(overview.current),
            len(overview.past),
        )
        return overview

    async def reload_after(self, user_id: int, action: str) -> BookingOverview | None:
        """Reload following a mutation the backend already accepted.

        Returns None when the reload fails; the mutation itself still stands.
        """
        try:
            return await self.load_overview(user_id)
        except AppException as exc:
            logger.warning("Reload after %s for user %s failed: %s", action, user_id, exc.detail)
            return None

    def find_owned(self, bookings: Sequence[Booking], user_id: int, booking_id: int) -> Booking:
        """Pick a booking out of a fetched list, checking ownership.

        Raises:
            NotFoundError: No booking with that ID
            AuthorizationError: Booking belongs to another user
        """
        for booking in bookings:
            if booking.booking_id == booking_id:
                if booking.user_id != user_id:
                    raise AuthorizationError("You can only manage your own bookings")
                return booking
        raise NotFoundError("Booking", str(booking_id))
