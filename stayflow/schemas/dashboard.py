"""Dashboard schemas."""

from datetime import datetime

from pydantic import BaseModel

from stayflow.schemas.booking import Booking
from stayflow.schemas.complaint import Complaint


class DashboardStats(BaseModel):
    """Counts derived from classified bookings and complaints."""

    total_bookings: int = 0
    upcoming_bookings: int = 0
    current_bookings: int = 0
    past_bookings: int = 0
    completed_bookings: int = 0
    cancelled_bookings: int = 0
    active_complaints: int = 0
    resolved_complaints: int = 0


class DashboardResponse(BaseModel):
    """Client dashboard payload."""

    generated_at: datetime
    stats: DashboardStats
    upcoming: list[Booking]
    recent: list[Booking]
    active_complaints: list[Complaint]
