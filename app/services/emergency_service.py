import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.core.logging import ActivityLogger
from app.models.exchange import Exchange, ExchangeStatus
from app.models.post import Post, PostCategory, PostStatus, PostType, Urgency
from app.schemas.emergency import EmergencyCreate, EmergencyTemplate
from app.schemas.post import EmergencyPostRead
from app.services.cache_service import EMERGENCY_FEED_KEY, FeedCache
from app.services.exchange_service import ExchangeService
from app.services.websocket_service import websocket_manager
from app.utils.constants import EMERGENCY_TEMPLATES, get_emergency_template
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class EmergencyService:
    def __init__(self, db: AsyncSession, cache: FeedCache):
        self.db = db
        self.cache = cache

    @staticmethod
    def list_templates() -> list[EmergencyTemplate]:
        return [EmergencyTemplate(**template) for template in EMERGENCY_TEMPLATES]

    async def list_active(self) -> list[EmergencyPostRead]:
        generation = await self.cache.generation()
        cached = await self.cache.get(EMERGENCY_FEED_KEY, generation)
        if cached is not None:
            return [EmergencyPostRead.model_validate(item) for item in cached]

        result = await self.db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.urgency == Urgency.EMERGENCY, Post.status == PostStatus.ACTIVE)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(settings.EMERGENCY_FEED_LIMIT)
        )
        posts = [EmergencyPostRead.model_validate(p) for p in result.scalars().all()]

        await self.cache.set(
            EMERGENCY_FEED_KEY, generation, [post.model_dump(mode="json") for post in posts]
        )
        return posts

    async def raise_emergency(self, user_id: int, data: EmergencyCreate) -> Post:
        description = data.description
        if data.template_id is not None:
            template = get_emergency_template(data.template_id)
            if template is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Unknown emergency template: {data.template_id}",
                )
            description = description or template["template"]

        post = Post(
            user_id=user_id,
            type=PostType.NEED,
            category=PostCategory.TIME,
            title=data.title,
            description=description,
            urgency=Urgency.EMERGENCY,
            location=data.location,
            status=PostStatus.ACTIVE,
            created_at=utcnow(),
        )
        self.db.add(post)

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to raise emergency for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to send emergency request",
            )

        ActivityLogger.log_emergency_posted(post.id, user_id, post.location)
        await self.cache.invalidate_feed()
        websocket_manager.broadcast_feed(
            {
                "type": "emergency_posted",
                "post_id": post.id,
                "title": post.title,
                "location": post.location,
            }
        )

        result = await self.db.execute(
            select(Post).options(selectinload(Post.author)).where(Post.id == post.id)
        )
        return result.scalar_one()

    async def respond(self, post_id: int, responder_id: int) -> Exchange:
        """Commit to helping: the exchange starts out already accepted."""
        post = await self.db.get(Post, post_id)
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        if post.urgency != Urgency.EMERGENCY or post.type != PostType.NEED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This post is not an emergency request",
            )

        return await ExchangeService(self.db).open_exchange(
            post, responder_id, initial_status=ExchangeStatus.ACCEPTED
        )
