import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.models.post import Post, PostStatus
from app.schemas.post import PostCreate, PostFilters, PostRead
from app.services.cache_service import ACTIVE_FEED_KEY, FeedCache
from app.services.post_catalog import filter_and_sort
from app.services.websocket_service import websocket_manager
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, db: AsyncSession, cache: FeedCache):
        self.db = db
        self.cache = cache

    async def _load_post(self, post_id: int) -> Post | None:
        result = await self.db.execute(
            select(Post).options(selectinload(Post.author)).where(Post.id == post_id)
        )
        return result.scalar_one_or_none()

    async def get_post(self, post_id: int) -> Post:
        post = await self._load_post(post_id)
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        return post

    async def create_post(self, user_id: int, data: PostCreate) -> Post:
        post = Post(
            user_id=user_id,
            type=data.type,
            category=data.category,
            title=data.title,
            description=data.description,
            urgency=data.urgency,
            location=data.location,
            availability=data.availability,
            status=PostStatus.ACTIVE,
            created_at=utcnow(),
        )
        self.db.add(post)

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create post for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create post",
            )

        await self.cache.invalidate_feed()
        websocket_manager.broadcast_feed(
            {"type": "post_created", "post_id": post.id, "urgency": post.urgency.value}
        )

        logger.info(f"Post {post.id} created by user {user_id}")
        return await self.get_post(post.id)

    async def close_post(self, post_id: int, user_id: int) -> Post:
        post = await self.get_post(post_id)

        if post.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the author can close this post",
            )
        if post.status == PostStatus.CLOSED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Post is already closed"
            )

        post.status = PostStatus.CLOSED
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to close post {post_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to close post",
            )

        await self.cache.invalidate_feed()
        websocket_manager.broadcast_feed({"type": "post_closed", "post_id": post_id})

        return post

    async def list_user_posts(self, user_id: int) -> list[Post]:
        result = await self.db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return list(result.scalars().all())

    async def active_snapshot(self) -> list[PostRead]:
        """The newest active posts, served from the feed cache when warm."""
        generation = await self.cache.generation()
        cached = await self.cache.get(ACTIVE_FEED_KEY, generation)
        if cached is not None:
            return [PostRead.model_validate(item) for item in cached]

        result = await self.db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.status == PostStatus.ACTIVE)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(settings.FEED_MAX_POSTS)
        )
        snapshot = [PostRead.model_validate(post) for post in result.scalars().all()]

        await self.cache.set(
            ACTIVE_FEED_KEY, generation, [item.model_dump(mode="json") for item in snapshot]
        )
        return snapshot

    async def list_feed(
        self, filters: PostFilters, exclude_user_id: int | None = None
    ) -> list[PostRead]:
        snapshot = await self.active_snapshot()
        return filter_and_sort(snapshot, filters, exclude_user_id=exclude_user_id)
