from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.exchange import OPEN_EXCHANGE_STATUSES, Exchange, ExchangeStatus
from app.models.post import Post, PostType
from app.models.profile import Profile
from app.schemas.dashboard import ActivityItem, DashboardMetrics, DashboardRead


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count_exchanges(self, user_id: int, *statuses: ExchangeStatus) -> int:
        result = await self.db.execute(
            select(func.count(Exchange.id)).where(
                Exchange.status.in_(statuses),
                or_(Exchange.helper_id == user_id, Exchange.requester_id == user_id),
            )
        )
        return result.scalar_one()

    async def get_metrics(self, user_id: int) -> DashboardMetrics:
        result = await self.db.execute(
            select(func.count(Post.id)).where(Post.user_id == user_id)
        )
        total_posts = result.scalar_one()

        active_exchanges = await self._count_exchanges(user_id, *OPEN_EXCHANGE_STATUSES)
        completed_helps = await self._count_exchanges(user_id, ExchangeStatus.COMPLETED)

        result = await self.db.execute(
            select(Profile.trust_level).where(Profile.id == user_id)
        )
        trust_level = result.scalar_one_or_none() or 0

        return DashboardMetrics(
            total_posts=total_posts,
            active_exchanges=active_exchanges,
            completed_helps=completed_helps,
            community_impact=completed_helps,
            trust_level=trust_level,
        )

    async def get_recent_activity(self, user_id: int) -> list[ActivityItem]:
        result = await self.db.execute(
            select(Post.id, Post.title, Post.type, Post.created_at)
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(settings.RECENT_ACTIVITY_LIMIT)
        )

        activities = [
            ActivityItem(
                id=f"post-{row.id}",
                type="post",
                title=f"Posted: {row.title}",
                time=row.created_at,
                icon="🤝" if row.type == PostType.OFFER else "🙏",
            )
            for row in result.all()
        ]
        activities.sort(key=lambda item: item.time, reverse=True)
        return activities[: settings.RECENT_ACTIVITY_MAX_ITEMS]

    async def get_dashboard(self, user_id: int) -> DashboardRead:
        return DashboardRead(
            metrics=await self.get_metrics(user_id),
            recent_activity=await self.get_recent_activity(user_id),
        )
