"""Client dashboard statistics."""

from collections.abc import Sequence

from stayflow.config import settings
from stayflow.domain.booking_state import BookingStatus
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.booking import Booking
from stayflow.schemas.dashboard import DashboardResponse, DashboardStats
from stayflow.services.booking_classifier import (
    BookingBuckets,
    BookingClassifier,
    booking_classifier,
)
from stayflow.services.complaint_classifier import (
    ComplaintBuckets,
    ComplaintClassifier,
    complaint_classifier,
)
from stayflow.utils.clock import Clock, now as current_time


class DashboardAggregator:
    """Counts derived from classified collections.

    Always computed from scratch; never incrementally patched.
    """

    def aggregate(
        self,
        bookings: Sequence[Booking],
        booking_buckets: BookingBuckets,
        complaint_buckets: ComplaintBuckets,
    ) -> DashboardStats:
        return DashboardStats(
            total_bookings=len(bookings),
            upcoming_bookings=len(booking_buckets.upcoming),
            current_bookings=len(booking_buckets.current),
            past_bookings=len(booking_buckets.past),
            completed_bookings=sum(1 for b in bookings if b.status == BookingStatus.COMPLETED),
            cancelled_bookings=sum(1 for b in bookings if b.status == BookingStatus.CANCELLED),
            active_complaints=len(complaint_buckets.active),
            resolved_complaints=len(complaint_buckets.resolved),
        )


class DashboardService:
    """Builds the client dashboard from fresh data."""

    def __init__(
        self,
        client: RentalApiClient,
        clock: Clock = current_time,
        aggregator: DashboardAggregator | None = None,
        bookings: BookingClassifier = booking_classifier,
        complaints: ComplaintClassifier = complaint_classifier,
    ):
        self.client = client
        self.clock = clock
        self.aggregator = aggregator or DashboardAggregator()
        self.bookings = bookings
        self.complaints = complaints

    async def load_dashboard(self, user_id: int) -> DashboardResponse:
        """Fetch bookings and complaints, then classify both against one now."""
        all_bookings = await self.client.fetch_bookings(user_id)
        all_complaints = await self.client.fetch_complaints(user_id)
        now = self.clock()

        booking_buckets = self.bookings.classify(all_bookings, now)
        complaint_buckets = self.complaints.classify(all_complaints)
        upcoming, _ = self.bookings.partition_for_dashboard(all_bookings, now)

        return DashboardResponse(
            generated_at=now,
            stats=self.aggregator.aggregate(all_bookings, booking_buckets, complaint_buckets),
            upcoming=upcoming,
            recent=self.bookings.recent(all_bookings, settings.recent_bookings_limit),
            active_complaints=list(complaint_buckets.active),
        )
