from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.core.dependencies import (
    CurrentUser,
    get_current_admin_user,
    get_verification_service,
)
from app.core.logging import SecurityLogger
from app.models.user import User
from app.schemas.verification import (
    VerificationCreate,
    VerificationRead,
    VerificationReview,
)
from app.services.verification_service import VerificationService

router = APIRouter()

VerificationServiceDep = Annotated[
    VerificationService, Depends(get_verification_service)
]


@router.post("", response_model=VerificationRead, status_code=status.HTTP_201_CREATED)
async def submit_verification_request(
    data: VerificationCreate,
    current_user: CurrentUser,
    service: VerificationServiceDep,
) -> VerificationRead:
    request = await service.submit_request(current_user.id, data)
    return VerificationRead.model_validate(request)


@router.get("/me", response_model=list[VerificationRead])
async def list_my_verification_requests(
    current_user: CurrentUser, service: VerificationServiceDep
) -> list[VerificationRead]:
    requests = await service.list_for_user(current_user.id)
    return [VerificationRead.model_validate(r) for r in requests]


@router.post("/{request_id}/review", response_model=VerificationRead)
async def review_verification_request(
    request: Request,
    request_id: int,
    review: VerificationReview,
    admin: Annotated[User, Depends(get_current_admin_user)],
    service: VerificationServiceDep,
) -> VerificationRead:
    verification = await service.review_request(request_id, admin.id, review)

    SecurityLogger.log_admin_action(
        request,
        admin_user_id=admin.id,
        action="verification_approved" if review.approve else "verification_rejected",
        target_user_id=verification.user_id,
        details={"request_id": request_id, "note": review.note},
    )

    return VerificationRead.model_validate(verification)
