"""API dependencies for the acting user and the application services."""

from typing import Annotated

from fastapi import Header, Request, status

from stayflow.core.exceptions import AuthorizationError
from stayflow.services.booking_management_service import CancellationManager, ModificationManager
from stayflow.services.booking_service import BookingService
from stayflow.services.complaint_service import ComplaintService
from stayflow.services.dashboard_service import DashboardService
from stayflow.services.reconciliation_service import ReconciliationLedger
from stayflow.services.reservation_service import ReservationService
from stayflow.services.review_service import ReviewService


async def get_current_user_id(
    x_user_id: Annotated[int | None, Header()] = None,
) -> int:
    """ID of the acting user, taken from the X-User-Id header.

    Identity is established upstream; a missing or invalid header sends the
    client back through login.
    """
    if x_user_id is None or x_user_id < 1:
        raise AuthorizationError(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id


# Services are built once per application in the lifespan handler


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def get_cancellation_manager(request: Request) -> CancellationManager:
    return request.app.state.cancellation_manager


def get_modification_manager(request: Request) -> ModificationManager:
    return request.app.state.modification_manager


def get_review_service(request: Request) -> ReviewService:
    return request.app.state.review_service


def get_complaint_service(request: Request) -> ComplaintService:
    return request.app.state.complaint_service


def get_dashboard_service(request: Request) -> DashboardService:
    return request.app.state.dashboard_service


def get_reservation_service(request: Request) -> ReservationService:
    return request.app.state.reservation_service


def get_reconciliation_ledger(request: Request) -> ReconciliationLedger:
    return request.app.state.reconciliation_ledger
