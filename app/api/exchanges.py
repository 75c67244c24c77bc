from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.core.dependencies import CurrentUser, get_exchange_service
from app.models.exchange import ExchangeStatus
from app.schemas.exchange import ExchangeCounts, ExchangeRead, ExchangeStatusUpdate
from app.services.exchange_service import ExchangeService, build_exchange_read

router = APIRouter()

ExchangeServiceDep = Annotated[ExchangeService, Depends(get_exchange_service)]


@router.get("", response_model=list[ExchangeRead])
async def list_exchanges(
    current_user: CurrentUser,
    service: ExchangeServiceDep,
    status: ExchangeStatus | None = Query(None),
    limit: int = Query(50, ge=1, le=settings.EXCHANGE_LIST_MAX),
) -> list[ExchangeRead]:
    exchanges = await service.list_exchanges(current_user.id, status, limit)
    return [build_exchange_read(exchange, current_user.id) for exchange in exchanges]


@router.get("/counts", response_model=ExchangeCounts)
async def count_exchanges(
    current_user: CurrentUser, service: ExchangeServiceDep
) -> ExchangeCounts:
    return await service.count_by_status(current_user.id)


@router.get("/{exchange_id}", response_model=ExchangeRead)
async def get_exchange(
    exchange_id: int, current_user: CurrentUser, service: ExchangeServiceDep
) -> ExchangeRead:
    exchange = await service.get_exchange(exchange_id, current_user.id)
    return build_exchange_read(exchange, current_user.id)


@router.post("/{exchange_id}/status", response_model=ExchangeRead)
async def update_exchange_status(
    exchange_id: int,
    data: ExchangeStatusUpdate,
    current_user: CurrentUser,
    service: ExchangeServiceDep,
) -> ExchangeRead:
    exchange = await service.update_status(exchange_id, current_user.id, data.status)
    return build_exchange_read(exchange, current_user.id)
