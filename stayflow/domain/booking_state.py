"""Booking state machine."""

from enum import Enum

from stayflow.core.exceptions import InvalidBookingStatus


class BookingStatus(str, Enum):
    """Lifecycle status of a booking as reported by the rental backend."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Statuses whose bucket depends on the stay dates
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

# Statuses that always land in the past bucket
CLOSED_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})

BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED, BookingStatus.COMPLETED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


def assert_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidBookingStatus(
            f"Invalid booking transition: {current.value} → {target.value}"
        )
