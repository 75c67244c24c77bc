from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.dependencies import CurrentUser, get_profile_service
from app.schemas.profile import ProfilePublic, ProfileRead, ProfileUpdate
from app.services.profile_service import ProfileService

router = APIRouter()

ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]


@router.get("/me", response_model=ProfileRead)
async def read_my_profile(
    current_user: CurrentUser, service: ProfileServiceDep
) -> ProfileRead:
    profile = await service.get_profile(current_user.id)
    return ProfileRead.model_validate(profile)


@router.put("/me", response_model=ProfileRead)
async def update_my_profile(
    data: ProfileUpdate, current_user: CurrentUser, service: ProfileServiceDep
) -> ProfileRead:
    profile = await service.upsert_profile(current_user.id, data)
    return ProfileRead.model_validate(profile)


@router.get("/{user_id}", response_model=ProfilePublic)
async def read_profile(
    user_id: int, _current_user: CurrentUser, service: ProfileServiceDep
) -> ProfilePublic:
    profile = await service.get_profile(user_id)
    return ProfilePublic.model_validate(profile)
