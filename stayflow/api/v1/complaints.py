"""Complaint endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from stayflow.api.deps import get_complaint_service, get_current_user_id
from stayflow.schemas.common import ApiResponse
from stayflow.schemas.complaint import ComplaintCreate, ComplaintOverview
from stayflow.services.complaint_service import ComplaintService

router = APIRouter()


@router.get("", response_model=ApiResponse[ComplaintOverview])
async def list_complaints(
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ComplaintService, Depends(get_complaint_service)],
) -> ApiResponse[ComplaintOverview]:
    """Current user's complaints, active first then resolved."""
    return ApiResponse(data=await service.list(user_id))


@router.post("", response_model=ApiResponse[ComplaintOverview], status_code=status.HTTP_201_CREATED)
async def submit_complaint(
    complaint: ComplaintCreate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[ComplaintService, Depends(get_complaint_service)],
) -> ApiResponse[ComplaintOverview]:
    """File a complaint, optionally about one of the user's bookings."""
    overview = await service.submit(user_id, complaint)
    return ApiResponse(message="Complaint submitted", data=overview)
