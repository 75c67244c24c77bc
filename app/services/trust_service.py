import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile

logger = logging.getLogger(__name__)


async def increment_trust_level(db: AsyncSession, user_id: int) -> None:
    """Add one to a profile's trust level.

    Not idempotent. The caller commits, so both increments of a completed
    exchange land together with its status change.
    """
    result = await db.execute(
        update(Profile)
        .where(Profile.id == user_id)
        .values(trust_level=Profile.trust_level + 1)
    )

    if result.rowcount == 0:
        logger.warning(f"Trust increment skipped: no profile for user {user_id}")
