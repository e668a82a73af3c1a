"""Reservation workflow endpoints.

A workflow moves DATES -> ADDONS -> CONFIRM -> SUBMITTING -> DONE. Every
endpoint answers with the workflow's current step and draft values.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from stayflow.api.deps import (
    get_current_user_id,
    get_reconciliation_ledger,
    get_reservation_service,
)
from stayflow.schemas.common import ApiResponse
from stayflow.schemas.reservation import (
    AddonsUpdate,
    DatesUpdate,
    DraftResponse,
    PartialCommitRecord,
    ReservationResult,
    ReservationStart,
    ReservationSubmit,
)
from stayflow.services.reconciliation_service import ReconciliationLedger
from stayflow.services.reservation_service import ReservationService, draft_response

router = APIRouter()


@router.post("", response_model=ApiResponse[DraftResponse], status_code=status.HTTP_201_CREATED)
async def start_reservation(
    request: ReservationStart,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ApiResponse[DraftResponse]:
    """Open a reservation for a property."""
    stepper = await service.start(user_id, request.property_id)
    return ApiResponse(message="Reservation started", data=draft_response(stepper))


@router.get("/reconciliation", response_model=ApiResponse[list[PartialCommitRecord]])
async def list_partial_commits(
    user_id: Annotated[int, Depends(get_current_user_id)],
    ledger: Annotated[ReconciliationLedger, Depends(get_reconciliation_ledger)],
) -> ApiResponse[list[PartialCommitRecord]]:
    """Charges of the current user that settled without a booking."""
    return ApiResponse(data=ledger.for_user(user_id))


@router.get("/{draft_id}", response_model=ApiResponse[DraftResponse])
async def get_reservation(
    draft_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ApiResponse[DraftResponse]:
    return ApiResponse(data=draft_response(service.get(user_id, draft_id)))


@router.put("/{draft_id}/dates", response_model=ApiResponse[DraftResponse])
async def set_dates(
    draft_id: str,
    request: DatesUpdate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ApiResponse[DraftResponse]:
    stepper = service.set_dates(user_id, draft_id, request.check_in, request.check_out)
    return ApiResponse(data=draft_response(stepper))


@router.put("/{draft_id}/addons", response_model=ApiResponse[DraftResponse])
async def set_addons(
    draft_id: str,
    request: AddonsUpdate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ApiResponse[DraftResponse]:
    stepper = service.set_addons(user_id, draft_id, request.extra_bedding, request.deep_clean)
    return ApiResponse(data=draft_response(stepper))


@router.post("/{draft_id}/next", response_model=ApiResponse[DraftResponse])
async def next_step(
    draft_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ApiResponse[DraftResponse]:
    """Advance one step; leaving DATES requires valid dates."""
    return ApiResponse(data=draft_response(service.next(user_id, draft_id)))


@router.post("/{draft_id}/back", response_model=ApiResponse[DraftResponse])
async def previous_step(
    draft_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ApiResponse[DraftResponse]:
    return ApiResponse(data=draft_response(service.back(user_id, draft_id)))


@router.post("/{draft_id}/submit", response_model=ApiResponse[ReservationResult])
async def submit_reservation(
    draft_id: str,
    request: ReservationSubmit,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ApiResponse[ReservationResult]:
    """Pay for the reservation and create the booking."""
    result = await service.submit(user_id, draft_id, request.account_reference)
    return ApiResponse(message="Booking confirmed", data=result)


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
async def abort_reservation(
    draft_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> None:
    """Discard the reservation."""
    service.abort(user_id, draft_id)
