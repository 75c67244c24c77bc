from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.core.dependencies import CurrentUser, get_emergency_service
from app.schemas.emergency import EmergencyCreate, EmergencyTemplate
from app.schemas.exchange import ExchangeRead
from app.schemas.post import EmergencyPostRead
from app.services.emergency_service import EmergencyService
from app.services.exchange_service import build_exchange_read

router = APIRouter()

EmergencyServiceDep = Annotated[EmergencyService, Depends(get_emergency_service)]


@router.get("", response_model=list[EmergencyPostRead])
async def list_emergencies(
    _current_user: CurrentUser, service: EmergencyServiceDep
) -> list[EmergencyPostRead]:
    return await service.list_active()


@router.get("/templates", response_model=list[EmergencyTemplate])
async def list_emergency_templates() -> list[EmergencyTemplate]:
    return EmergencyService.list_templates()


@router.post("", response_model=EmergencyPostRead, status_code=status.HTTP_201_CREATED)
async def raise_emergency(
    data: EmergencyCreate, current_user: CurrentUser, service: EmergencyServiceDep
) -> EmergencyPostRead:
    post = await service.raise_emergency(current_user.id, data)
    return EmergencyPostRead.model_validate(post)


@router.post(
    "/{post_id}/respond",
    response_model=ExchangeRead,
    status_code=status.HTTP_201_CREATED,
)
async def respond_to_emergency(
    post_id: int, current_user: CurrentUser, service: EmergencyServiceDep
) -> ExchangeRead:
    exchange = await service.respond(post_id, current_user.id)
    return build_exchange_read(exchange, current_user.id)
