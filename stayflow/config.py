"""Application configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="STAYFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "StayFlow"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: List[str] = ["http://localhost:4200"]

    # Remote rental backend
    backend_base_url: str = "http://localhost:8080/v1/api"
    # The source client never set a timeout; None restores that behaviour.
    request_timeout: float | None = Field(default=10.0)

    bookings_path: str = "/client/viewBooking/{user_id}"
    property_path: str = "/client/viewClickedProperty/{property_id}"
    charge_path: str = "/client/alwaysTrue"
    create_booking_path: str = "/client/makeBooking"
    cancel_booking_path: str = "/client/cancelBooking/{booking_id}"
    modify_booking_path: str = "/client/modifyBooking"
    complaints_path: str = "/user/viewComplaints/{user_id}"
    submit_complaint_path: str = "/client/addComplaintForBooking"
    rating_path: str = "/admin/closeBookingAndRating"

    # Classification
    timezone: str = "UTC"
    recent_bookings_limit: int = 5

    # Reservation drafts idle longer than this are discarded
    reservation_ttl_minutes: int = 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
