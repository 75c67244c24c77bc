from fastapi import Depends, HTTPException, status, Cookie
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from .auth import user_id_from_token
from ..models.user import User
from ..services.cache_service import FeedCache, feed_cache
from ..services.dashboard_service import DashboardService
from ..services.emergency_service import EmergencyService
from ..services.exchange_service import ExchangeService
from ..services.post_service import PostService
from ..services.profile_service import ProfileService
from ..services.verification_service import VerificationService
from typing import Annotated

bearer_scheme = HTTPBearer(auto_error=False)

DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user(
    db: DatabaseSession,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
    access_token: str | None = Cookie(None),
) -> User:
    token = credentials.credentials if credentials else access_token
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )

    user_id = user_id_from_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        )

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user"
        )

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_current_admin_user(current_user: CurrentUser) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required"
        )
    return current_user


async def get_feed_cache() -> FeedCache:
    return feed_cache


async def get_post_service(
    db: DatabaseSession, cache: Annotated[FeedCache, Depends(get_feed_cache)]
) -> PostService:
    return PostService(db, cache)


async def get_exchange_service(db: DatabaseSession) -> ExchangeService:
    return ExchangeService(db)


async def get_emergency_service(
    db: DatabaseSession, cache: Annotated[FeedCache, Depends(get_feed_cache)]
) -> EmergencyService:
    return EmergencyService(db, cache)


async def get_profile_service(db: DatabaseSession) -> ProfileService:
    return ProfileService(db)


async def get_dashboard_service(db: DatabaseSession) -> DashboardService:
    return DashboardService(db)


async def get_verification_service(db: DatabaseSession) -> VerificationService:
    return VerificationService(db)
