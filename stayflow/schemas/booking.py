"""Booking-related Pydantic schemas.

Inbound models accept the rental backend's camelCase field names as well as
their snake_case names; this API always answers in snake_case.
"""

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from stayflow.domain.booking_state import BookingStatus


def _calendar_date(v):
    # The backend sometimes sends midnight timestamps for date fields
    if isinstance(v, str) and "T" in v:
        return v.split("T", 1)[0]
    if isinstance(v, datetime):
        return v.date()
    return v


class Booking(BaseModel):
    """A reservation as held by the rental backend."""

    model_config = ConfigDict(populate_by_name=True)

    booking_id: int | None = Field(
        default=None, validation_alias=AliasChoices("bookingId", "booking_id")
    )
    property_id: int = Field(validation_alias=AliasChoices("propertyId", "property_id"))
    user_id: int = Field(validation_alias=AliasChoices("userId", "user_id"))
    check_in: date = Field(validation_alias=AliasChoices("checkinDate", "check_in"))
    check_out: date = Field(validation_alias=AliasChoices("checkoutDate", "check_out"))
    payment_settled: bool = Field(
        default=False, validation_alias=AliasChoices("isPaymentStatus", "payment_settled")
    )
    status: BookingStatus = Field(
        default=BookingStatus.PENDING,
        validation_alias=AliasChoices("isBookingStatus", "status"),
    )
    extra_bedding: bool = Field(
        default=False, validation_alias=AliasChoices("hasExtraCot", "extra_bedding")
    )
    deep_clean: bool = Field(
        default=False, validation_alias=AliasChoices("hasDeepClean", "deep_clean")
    )

    # Display-only
    property_name: str | None = Field(
        default=None, validation_alias=AliasChoices("propertyName", "property_name")
    )
    city: str | None = None
    username: str | None = None

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def strip_time(cls, v):
        return _calendar_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
        return v


class BookingOverview(BaseModel):
    """A user's bookings classified against one "now" snapshot."""

    generated_at: datetime
    upcoming: list[Booking]
    current: list[Booking]
    past: list[Booking]
    recent: list[Booking]
    # Bookings that may still be cancelled or modified
    actionable_ids: list[int]


class BookingCancelRequest(BaseModel):
    """Schema for cancelling a booking."""

    # Explicit user confirmation; False is rejected
    confirm: bool = False


class BookingModifyRequest(BaseModel):
    """Full replacement of a booking's dates and add-ons."""

    check_in: date | None = None
    check_out: date | None = None
    extra_bedding: bool = False
    deep_clean: bool = False


class BookingModifyForm(BaseModel):
    """Modification form pre-filled from an existing booking."""

    booking_id: int
    property_id: int
    check_in: date
    check_out: date
    extra_bedding: bool
    deep_clean: bool
    nights: int
