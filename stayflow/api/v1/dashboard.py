"""Client dashboard endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from stayflow.api.deps import get_current_user_id, get_dashboard_service
from stayflow.schemas.common import ApiResponse
from stayflow.schemas.dashboard import DashboardResponse
from stayflow.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=ApiResponse[DashboardResponse])
async def get_dashboard(
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
) -> ApiResponse[DashboardResponse]:
    """Booking and complaint statistics for the current user."""
    return ApiResponse(data=await service.load_dashboard(user_id))
