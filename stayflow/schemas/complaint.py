"""Complaint-related Pydantic schemas."""

from datetime import UTC, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from stayflow.domain.complaint_state import ComplaintStatus, ComplaintType


class Complaint(BaseModel):
    """A complaint as held by the rental backend."""

    model_config = ConfigDict(populate_by_name=True)

    complaint_id: int = Field(validation_alias=AliasChoices("complaintId", "complaint_id"))
    user_id: int | None = Field(default=None, validation_alias=AliasChoices("userId", "user_id"))
    booking_id: int | None = Field(
        default=None, validation_alias=AliasChoices("bookingId", "booking_id")
    )
    description: str = Field(
        default="", validation_alias=AliasChoices("complaintDescription", "description")
    )
    complaint_type: ComplaintType = Field(
        default=ComplaintType.OTHER,
        validation_alias=AliasChoices("complaintType", "complaint_type"),
    )
    status: ComplaintStatus = Field(
        default=ComplaintStatus.PENDING,
        validation_alias=AliasChoices("complaintStatus", "status"),
    )
    created_at: datetime = Field(validation_alias=AliasChoices("complaintDate", "created_at"))

    @field_validator("created_at", mode="before")
    @classmethod
    def accept_plain_date(cls, v):
        if isinstance(v, str) and len(v) == 10:
            v = f"{v}T00:00:00"
        return v

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Mixed naive/aware values would break sorting
        if v.tzinfo is None:
            v = v.replace(tzinfo=UTC)
        return v


class ComplaintCreate(BaseModel):
    """Schema for submitting a complaint."""

    description: str = Field(..., min_length=10, max_length=1000)
    complaint_type: ComplaintType = ComplaintType.PROPERTY
    booking_id: int | None = None

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: str) -> str:
        if isinstance(v, str):
            v = v.strip()
        return v


class ComplaintOverview(BaseModel):
    """A user's complaints split by resolution."""

    active: list[Complaint]
    resolved: list[Complaint]
