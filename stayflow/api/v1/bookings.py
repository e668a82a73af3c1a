"""Booking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from stayflow.api.deps import (
    get_booking_service,
    get_cancellation_manager,
    get_current_user_id,
    get_modification_manager,
    get_review_service,
)
from stayflow.schemas.booking import (
    BookingCancelRequest,
    BookingModifyForm,
    BookingModifyRequest,
    BookingOverview,
)
from stayflow.schemas.common import ApiResponse
from stayflow.schemas.review import ReviewCreate
from stayflow.services.booking_management_service import CancellationManager, ModificationManager
from stayflow.services.booking_service import BookingService
from stayflow.services.review_service import ReviewService

router = APIRouter()


@router.get("", response_model=ApiResponse[BookingOverview])
async def list_bookings(
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> ApiResponse[BookingOverview]:
    """Current user's bookings split into upcoming, current and past."""
    overview = await service.load_overview(user_id)
    return ApiResponse(message="Bookings loaded", data=overview)


@router.post("/{booking_id}/cancel", response_model=ApiResponse[BookingOverview])
async def cancel_booking(
    booking_id: int,
    request: BookingCancelRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    manager: Annotated[CancellationManager, Depends(get_cancellation_manager)],
) -> ApiResponse[BookingOverview]:
    """Cancel a confirmed booking that has not started."""
    overview = await manager.cancel(user_id, booking_id, request.confirm)
    return ApiResponse(message="Booking cancelled successfully", data=overview)


@router.get("/{booking_id}/modify", response_model=ApiResponse[BookingModifyForm])
async def get_modify_form(
    booking_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    manager: Annotated[ModificationManager, Depends(get_modification_manager)],
) -> ApiResponse[BookingModifyForm]:
    """Modification form pre-filled with the booking's current values."""
    form = await manager.prefill(user_id, booking_id)
    return ApiResponse(data=form)


@router.put("/{booking_id}", response_model=ApiResponse[BookingOverview])
async def modify_booking(
    booking_id: int,
    request: BookingModifyRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    manager: Annotated[ModificationManager, Depends(get_modification_manager)],
) -> ApiResponse[BookingOverview]:
    """Replace the dates and add-ons of a booking."""
    overview = await manager.modify(user_id, booking_id, request)
    return ApiResponse(message="Booking modified successfully", data=overview)


@router.post("/{booking_id}/review", response_model=ApiResponse[BookingOverview])
async def review_booking(
    booking_id: int,
    review: ReviewCreate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> ApiResponse[BookingOverview]:
    """Rate a completed stay."""
    overview = await service.submit(user_id, booking_id, review)
    return ApiResponse(message="Thank you for your review", data=overview)
