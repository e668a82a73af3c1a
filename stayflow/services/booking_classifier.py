"""Booking classification.

Rules (dates compared as calendar days against one frozen "now"):
- PENDING / CONFIRMED: check-in after today is upcoming, a stay spanning
  today is current, anything else is past
- CANCELLED / COMPLETED: always past, whatever the dates

Buckets are rebuilt from the full list on every call; nothing is patched.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from stayflow.domain.booking_state import ACTIVE_STATUSES, CLOSED_STATUSES, BookingStatus
from stayflow.domain.date_rules import to_day
from stayflow.schemas.booking import Booking

RECENT_LIMIT = 5


class Bucket(str, Enum):
    """Temporal classification of a booking."""

    UPCOMING = "upcoming"
    CURRENT = "current"
    PAST = "past"


@dataclass(frozen=True)
class BookingBuckets:
    """Bookings split into upcoming, current and past."""

    upcoming: tuple[Booking, ...]
    current: tuple[Booking, ...]
    past: tuple[Booking, ...]


def _by_check_in(booking: Booking) -> date:
    return booking.check_in


class BookingClassifier:
    """Partition and order a user's bookings."""

    def bucket_for(self, booking: Booking, now: date | datetime) -> Bucket:
        """Bucket of a single booking relative to now."""
        if booking.status in CLOSED_STATUSES:
            return Bucket.PAST

        today = to_day(now)
        if booking.check_in > today:
            return Bucket.UPCOMING
        if booking.check_in <= today <= booking.check_out:
            return Bucket.CURRENT
        return Bucket.PAST

    def classify(self, bookings: Iterable[Booking], now: date | datetime) -> BookingBuckets:
        """Split bookings into buckets.

        Args:
            bookings: The complete, freshly fetched list
            now: Single snapshot used for the whole pass

        Returns:
            BookingBuckets: upcoming and current ascending by check-in,
            past descending by check-in
        """
        today = to_day(now)
        buckets: dict[Bucket, list[Booking]] = {bucket: [] for bucket in Bucket}
        for booking in bookings:
            buckets[self.bucket_for(booking, today)].append(booking)

        return BookingBuckets(
            upcoming=tuple(sorted(buckets[Bucket.UPCOMING], key=_by_check_in)),
            current=tuple(sorted(buckets[Bucket.CURRENT], key=_by_check_in)),
            past=tuple(sorted(buckets[Bucket.PAST], key=_by_check_in, reverse=True)),
        )

    def recent(self, bookings: Iterable[Booking], limit: int = RECENT_LIMIT) -> list[Booking]:
        """Most recent bookings by check-in, regardless of bucket.

        For summary display only; says nothing about what may be acted on.
        """
        return sorted(bookings, key=_by_check_in, reverse=True)[:limit]

    def is_actionable(self, booking: Booking, now: date | datetime) -> bool:
        """Whether a booking may still be cancelled or modified."""
        today = to_day(now)
        return (
            booking.status == BookingStatus.CONFIRMED
            and booking.check_in > today
            and booking.check_out > today
        )

    def partition_for_dashboard(
        self, bookings: Iterable[Booking], now: date | datetime
    ) -> tuple[list[Booking], list[Booking]]:
        """Two-way split used by the dashboard's "upcoming" list.

        Active bookings checking in today or later are upcoming (ascending);
        everything else is past (descending).
        """
        today = to_day(now)
        upcoming: list[Booking] = []
        past: list[Booking] = []
        for booking in bookings:
            if booking.status in ACTIVE_STATUSES and booking.check_in >= today:
                upcoming.append(booking)
            else:
                past.append(booking)
        upcoming.sort(key=_by_check_in)
        past.sort(key=_by_check_in, reverse=True)
        return upcoming, past


# Singleton instance
booking_classifier = BookingClassifier()
