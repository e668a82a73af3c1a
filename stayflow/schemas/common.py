"""Response envelopes shared by the rental backend and this API."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for successful reads and writes."""

    success: bool = True
    message: str = ""
    data: T | None = None


class ErrorResponse(BaseModel):
    """Envelope for failed requests."""

    success: bool = False
    message: str
    timestamp: datetime
    # Stable machine-readable code, e.g. "partial_commit"
    error: str | None = None
    details: list[dict] | dict | None = None
