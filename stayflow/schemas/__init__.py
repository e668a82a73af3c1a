"""Pydantic schemas for API validation."""

from stayflow.schemas.booking import (
    Booking,
    BookingCancelRequest,
    BookingModifyForm,
    BookingModifyRequest,
    BookingOverview,
)
from stayflow.schemas.common import ApiResponse, ErrorResponse
from stayflow.schemas.complaint import Complaint, ComplaintCreate, ComplaintOverview
from stayflow.schemas.dashboard import DashboardResponse, DashboardStats
from stayflow.schemas.property import Property
from stayflow.schemas.reservation import (
    AddonsUpdate,
    DatesUpdate,
    DraftResponse,
    PartialCommitRecord,
    ReservationResult,
    ReservationStart,
    ReservationSubmit,
)
from stayflow.schemas.review import ReviewCreate

__all__ = [
    # Envelopes
    "ApiResponse",
    "ErrorResponse",
    # Booking
    "Booking",
    "BookingCancelRequest",
    "BookingModifyForm",
    "BookingModifyRequest",
    "BookingOverview",
    # Property
    "Property",
    # Complaint
    "Complaint",
    "ComplaintCreate",
    "ComplaintOverview",
    # Dashboard
    "DashboardResponse",
    "DashboardStats",
    # Reservation
    "AddonsUpdate",
    "DatesUpdate",
    "DraftResponse",
    "PartialCommitRecord",
    "ReservationResult",
    "ReservationStart",
    "ReservationSubmit",
    # Review
    "ReviewCreate",
]
