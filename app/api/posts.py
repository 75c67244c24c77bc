from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import (
    CurrentUser,
    get_exchange_service,
    get_post_service,
)
from app.models.post import PostCategory, PostType, Urgency
from app.schemas.exchange import ExchangeRead
from app.schemas.post import PostCreate, PostFilters, PostRead
from app.services.exchange_service import ExchangeService, build_exchange_read
from app.services.post_service import PostService

router = APIRouter()

PostServiceDep = Annotated[PostService, Depends(get_post_service)]


@router.get("", response_model=list[PostRead])
async def list_posts(
    current_user: CurrentUser,
    service: PostServiceDep,
    type: PostType | None = Query(None),
    category: PostCategory | None = Query(None),
    urgency: Urgency | None = Query(None),
    search: str | None = Query(None, max_length=100),
    exclude_own: bool = Query(False),
) -> list[PostRead]:
    filters = PostFilters(type=type, category=category, urgency=urgency, search=search)
    return await service.list_feed(
        filters, exclude_user_id=current_user.id if exclude_own else None
    )


@router.get("/my", response_model=list[PostRead])
async def list_my_posts(
    current_user: CurrentUser, service: PostServiceDep
) -> list[PostRead]:
    posts = await service.list_user_posts(current_user.id)
    return [PostRead.model_validate(post) for post in posts]


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate, current_user: CurrentUser, service: PostServiceDep
) -> PostRead:
    post = await service.create_post(current_user.id, data)
    return PostRead.model_validate(post)


@router.get("/{post_id}", response_model=PostRead)
async def get_post(
    post_id: int, _current_user: CurrentUser, service: PostServiceDep
) -> PostRead:
    post = await service.get_post(post_id)
    return PostRead.model_validate(post)


@router.post("/{post_id}/close", response_model=PostRead)
async def close_post(
    post_id: int, current_user: CurrentUser, service: PostServiceDep
) -> PostRead:
    post = await service.close_post(post_id, current_user.id)
    return PostRead.model_validate(post)


@router.post(
    "/{post_id}/contact",
    response_model=ExchangeRead,
    status_code=status.HTTP_201_CREATED,
)
async def contact_post(
    post_id: int,
    current_user: CurrentUser,
    service: Annotated[ExchangeService, Depends(get_exchange_service)],
) -> ExchangeRead:
    exchange = await service.contact_post(post_id, current_user.id)
    return build_exchange_read(exchange, current_user.id)
