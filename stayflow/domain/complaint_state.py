"""Complaint statuses and types."""

from enum import Enum


class ComplaintStatus(str, Enum):
    """Complaint handling status."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class ComplaintType(str, Enum):
    """What a complaint is about."""

    PROPERTY = "PROPERTY"
    BOOKING = "BOOKING"
    PAYMENT = "PAYMENT"
    USER = "USER"
    OTHER = "OTHER"


RESOLVED_STATUSES = frozenset({ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED})


def is_resolved(status: ComplaintStatus) -> bool:
    return status in RESOLVED_STATUSES
