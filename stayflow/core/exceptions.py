"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code = "error"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class DateRangeError(ValidationError):
    """One or more date-range rules were violated.

    ``violations`` holds every violated rule, not just the first one, so a form
    can report them all at once.
    """

    code = "invalid_dates"

    def __init__(self, violations: list, detail: str | None = None) -> None:
        self.violations = list(violations)
        messages = [v.message for v in self.violations]
        super().__init__(
            detail=detail or " ".join(messages) or "Invalid dates",
            errors=[{"rule": v.value, "message": v.message} for v in self.violations],
        )


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthorizationError(AppException):
    """Authorization denied exception.

    Callers should send the user back through re-authentication.
    """

    code = "unauthorized"

    def __init__(
        self,
        detail: str = "Unauthorized. Please login again.",
        status_code: int = status.HTTP_403_FORBIDDEN,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)


class ConflictError(AppException):
    """Duplicate submission or contention on a resource."""

    code = "conflict"

    def __init__(self, detail: str = "This request conflicts with another one in progress") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidStepTransition(ConflictError):
    """Reservation workflow step cannot be taken from the current state."""

    code = "invalid_step"

    def __init__(self, state: str, event: str) -> None:
        self.state = state
        self.event = event
        super().__init__(f"Cannot {event} a reservation in step {state}")


class InvalidBookingStatus(AppException):
    """Invalid booking status for operation."""

    code = "invalid_booking_status"

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class PaymentError(AppException):
    """Payment processing error."""

    code = "payment_error"

    def __init__(self, detail: str = "Payment processing failed") -> None:
        super().__init__(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=detail)


class PaymentFailed(PaymentError):
    """The charge was declined; no funds moved and no booking was attempted."""

    code = "payment_failed"


class PartialCommitError(AppException):
    """The charge settled but the reservation was not created.

    The user has been charged without holding a booking. This is not a local
    retry case: ``context`` carries what a reconciler needs (amount, property,
    dates, idempotency key).
    """

    code = "partial_commit"

    def __init__(self, context: dict[str, Any], reason: str | None = None) -> None:
        self.context = context
        self.reason = reason
        detail = (
            "Your payment was processed but the booking could not be created. "
            "Do not pay again; support will reconcile this charge."
        )
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class RemoteServiceError(AppException):
    """The rental backend rejected or failed a request."""

    code = "remote_error"

    def __init__(
        self,
        detail: str | None = None,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        remote_status: int | None = None,
    ) -> None:
        self.remote_status = remote_status
        super().__init__(
            status_code=status_code,
            detail=detail or "An unexpected error occurred.",
        )


class ConnectivityError(RemoteServiceError):
    """The rental backend could not be reached."""

    code = "connectivity"

    def __init__(self, detail: str = "Cannot connect to server. Please check if the backend is running.") -> None:
        super().__init__(
            detail=detail,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            remote_status=0,
        )


class ServerError(RemoteServiceError):
    """The rental backend answered with a 5xx status."""

    code = "server_error"

    def __init__(self, remote_status: int = 500, detail: str = "Server error. Please try again later.") -> None:
        super().__init__(detail=detail, remote_status=remote_status)
