"""Core utilities: exceptions, idempotency and middleware."""

from stayflow.core.exceptions import (
    AppException,
    AuthorizationError,
    ConflictError,
    ConnectivityError,
    DateRangeError,
    InvalidBookingStatus,
    InvalidStepTransition,
    NotFoundError,
    PartialCommitError,
    PaymentError,
    PaymentFailed,
    RemoteServiceError,
    ServerError,
    ValidationError,
)
from stayflow.core.idempotency import InFlightRegistry, generate_idempotency_key

__all__ = [
    "AppException",
    "AuthorizationError",
    "ConflictError",
    "ConnectivityError",
    "DateRangeError",
    "InvalidBookingStatus",
    "InvalidStepTransition",
    "NotFoundError",
    "PartialCommitError",
    "PaymentError",
    "PaymentFailed",
    "RemoteServiceError",
    "ServerError",
    "ValidationError",
    "InFlightRegistry",
    "generate_idempotency_key",
]
