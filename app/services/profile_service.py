import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.schemas.profile import ProfileUpdate
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: int) -> Profile:
        profile = await self.db.get(Profile, user_id)
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
            )
        return profile

    async def username_taken(self, username: str, exclude_user_id: int | None = None) -> bool:
        query = select(Profile.id).where(Profile.username == username)
        if exclude_user_id is not None:
            query = query.where(Profile.id != exclude_user_id)
        result = await self.db.execute(query)
        return result.first() is not None

    async def upsert_profile(self, user_id: int, data: ProfileUpdate) -> Profile:
        """Create the caller's profile or replace its editable fields."""
        if await self.username_taken(data.username, exclude_user_id=user_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Username already taken"
            )

        now = utcnow()
        profile = await self.db.get(Profile, user_id)
        if profile is None:
            profile = Profile(id=user_id, created_at=now)
            self.db.add(profile)

        profile.username = data.username
        profile.location = data.location
        profile.bio = data.bio
        profile.skills = data.skills
        profile.phone = data.phone
        profile.emergency_contact = data.emergency_contact
        profile.availability = data.availability
        profile.updated_at = now

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Username already taken"
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to save profile for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to save profile",
            )

        await self.db.refresh(profile)
        return profile
