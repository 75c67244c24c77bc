from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.dependencies import CurrentUser, get_dashboard_service
from app.schemas.dashboard import DashboardRead
from app.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=DashboardRead)
async def get_dashboard(
    current_user: CurrentUser,
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
) -> DashboardRead:
    return await service.get_dashboard(current_user.id)
