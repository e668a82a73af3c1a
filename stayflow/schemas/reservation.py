"""Reservation workflow schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from stayflow.schemas.booking import Booking, BookingOverview


class ReservationStart(BaseModel):
    """Open a reservation workflow for a property."""

    property_id: int = Field(..., ge=1)


class DatesUpdate(BaseModel):
    """Candidate stay dates."""

    check_in: date | None = None
    check_out: date | None = None


class AddonsUpdate(BaseModel):
    """Optional services for the stay."""

    extra_bedding: bool = False
    deep_clean: bool = False


class ReservationSubmit(BaseModel):
    """Payment details for confirming a reservation."""

    account_reference: str = ""


class DraftResponse(BaseModel):
    """Current step and values of a reservation workflow."""

    draft_id: str
    state: str
    property_id: int
    property_name: str | None = None
    nightly_rate: int
    check_in: date | None = None
    check_out: date | None = None
    extra_bedding: bool = False
    deep_clean: bool = False
    nights: int | None = None
    total_amount: int | None = None
    last_error: str | None = None


class ReservationResult(BaseModel):
    """Created booking and the rebuilt booking lists."""

    booking: Booking
    # None when the reload after creation failed
    bookings: BookingOverview | None = None


class PartialCommitRecord(BaseModel):
    """A charge that settled without a booking being created."""

    idempotency_key: str
    user_id: int
    property_id: int
    amount: int
    check_in: date
    check_out: date
    extra_bedding: bool = False
    deep_clean: bool = False
    failure: str | None = None
    recorded_at: datetime
