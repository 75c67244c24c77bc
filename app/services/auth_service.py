import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.auth import create_access_token, get_password_hash, verify_password
from app.models.profile import Profile
from app.models.user import User
from app.schemas.auth import TokenResponse, UserRegister
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def register_user(self, user_data: UserRegister) -> User:
        """Create the account together with its profile in one commit."""
        email = user_data.email.lower()

        result = await self.db.execute(select(User.id).where(User.email == email))
        if result.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )

        result = await self.db.execute(
            select(Profile.id).where(Profile.username == user_data.username)
        )
        if result.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already taken",
            )

        now = utcnow()
        db_user = User(
            email=email,
            password_hash=get_password_hash(user_data.password),
            is_active=True,
            is_admin=False,
            created_at=now,
        )
        self.db.add(db_user)

        try:
            await self.db.flush()
            self.db.add(
                Profile(
                    id=db_user.id,
                    username=user_data.username,
                    location=user_data.location,
                    created_at=now,
                    updated_at=now,
                )
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email or username already registered",
            )

        await self.db.refresh(db_user)
        return db_user

    async def authenticate_user(self, email: str, password: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    def create_tokens(self, user: User) -> TokenResponse:
        access_token = create_access_token(data={"sub": str(user.id)})
        return TokenResponse(
            access_token=access_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )
