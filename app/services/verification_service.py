import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.models.verification_request import VerificationRequest, VerificationStatus
from app.schemas.verification import VerificationCreate, VerificationReview
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class VerificationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def submit_request(
        self, user_id: int, data: VerificationCreate
    ) -> VerificationRequest:
        result = await self.db.execute(
            select(VerificationRequest.id).where(
                VerificationRequest.user_id == user_id,
                VerificationRequest.status == VerificationStatus.PENDING,
            )
        )
        if result.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A verification request is already pending",
            )

        profile = await self.db.get(Profile, user_id)
        if profile and profile.verified:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Profile is already verified",
            )

        request = VerificationRequest(
            user_id=user_id,
            method=data.method,
            details=data.details,
            status=VerificationStatus.PENDING,
            created_at=utcnow(),
        )
        self.db.add(request)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A verification request is already pending",
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to submit verification request for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to submit verification request",
            )

        return request

    async def list_for_user(self, user_id: int) -> list[VerificationRequest]:
        result = await self.db.execute(
            select(VerificationRequest)
            .where(VerificationRequest.user_id == user_id)
            .order_by(VerificationRequest.created_at.desc(), VerificationRequest.id.desc())
        )
        return list(result.scalars().all())

    async def review_request(
        self, request_id: int, admin_id: int, review: VerificationReview
    ) -> VerificationRequest:
        request = await self.db.get(VerificationRequest, request_id)
        if not request:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Verification request not found",
            )
        if request.status != VerificationStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Verification request has already been reviewed",
            )

        request.status = (
            VerificationStatus.APPROVED if review.approve else VerificationStatus.REJECTED
        )
        request.reviewed_by = admin_id
        request.reviewed_at = utcnow()

        if review.approve:
            profile = await self.db.get(Profile, request.user_id)
            if profile:
                profile.verified = True
                profile.updated_at = utcnow()

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to review verification request {request_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to review verification request",
            )

        return request
