import logging

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.logging import ActivityLogger
from app.models.exchange import OPEN_EXCHANGE_STATUSES, Exchange, ExchangeStatus
from app.models.post import Post, PostStatus
from app.schemas.exchange import (
    ExchangeCounts,
    ExchangeParticipant,
    ExchangePostSummary,
    ExchangeRead,
)
from app.services.exchange_lifecycle import can_transition, derive_role, initial_parties
from app.services.trust_service import increment_trust_level
from app.services.websocket_service import websocket_manager
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


def build_exchange_read(exchange: Exchange, user_id: int) -> ExchangeRead:
    """Shape an exchange for one participant: their role and what they may do next."""
    role = derive_role(
        user_id, exchange.helper_id, exchange.requester_id, exchange.post.type
    )
    current = exchange.status
    helper = ExchangeParticipant.model_validate(exchange.helper)
    requester = ExchangeParticipant.model_validate(exchange.requester)

    return ExchangeRead(
        id=exchange.id,
        status=current,
        post=ExchangePostSummary.model_validate(exchange.post),
        helper=helper,
        requester=requester,
        role=role,
        counterpart=requester if user_id == exchange.helper_id else helper,
        can_accept=can_transition(current, ExchangeStatus.ACCEPTED, role),
        can_complete=can_transition(current, ExchangeStatus.COMPLETED, role),
        can_cancel=can_transition(current, ExchangeStatus.CANCELLED, role),
        created_at=exchange.created_at,
        updated_at=exchange.updated_at,
    )


class ExchangeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _exchange_query(self):
        return select(Exchange).options(
            selectinload(Exchange.post),
            selectinload(Exchange.helper),
            selectinload(Exchange.requester),
        )

    async def _load_exchange(
        self, exchange_id: int, refresh: bool = False
    ) -> Exchange | None:
        query = self._exchange_query().where(Exchange.id == exchange_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _get_loaded(self, exchange_id: int, refresh: bool = False) -> Exchange:
        exchange = await self._load_exchange(exchange_id, refresh=refresh)
        if not exchange:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Exchange not found"
            )
        return exchange

    async def _has_open_exchange(
        self, post_id: int, helper_id: int, requester_id: int
    ) -> bool:
        result = await self.db.execute(
            select(Exchange.id).where(
                Exchange.post_id == post_id,
                Exchange.helper_id == helper_id,
                Exchange.requester_id == requester_id,
                Exchange.status.in_(OPEN_EXCHANGE_STATUSES),
            )
        )
        return result.first() is not None

    async def open_exchange(
        self,
        post: Post,
        initiator_id: int,
        initial_status: ExchangeStatus = ExchangeStatus.PENDING,
    ) -> Exchange:
        if post.user_id == initiator_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot start an exchange on your own post",
            )
        if post.status != PostStatus.ACTIVE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This post is no longer active",
            )

        parties = initial_parties(post.type, post.user_id, initiator_id)

        if await self._has_open_exchange(post.id, parties.helper_id, parties.requester_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You already have an open exchange for this post",
            )

        now = utcnow()
        exchange = Exchange(
            post_id=post.id,
            helper_id=parties.helper_id,
            requester_id=parties.requester_id,
            status=initial_status,
            created_at=now,
            updated_at=now,
        )
        self.db.add(exchange)

        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent contact won the open-exchange unique index.
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You already have an open exchange for this post",
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create exchange on post {post.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create exchange",
            )

        ActivityLogger.log_exchange_created(
            exchange_id=exchange.id,
            post_id=post.id,
            helper_id=parties.helper_id,
            requester_id=parties.requester_id,
            status=initial_status.value,
        )
        websocket_manager.notify_exchange(
            "exchange_created",
            exchange.id,
            initial_status.value,
            (parties.helper_id, parties.requester_id),
        )

        return await self._get_loaded(exchange.id)

    async def contact_post(self, post_id: int, initiator_id: int) -> Exchange:
        post = await self.db.get(Post, post_id)
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        return await self.open_exchange(post, initiator_id)

    async def get_exchange(self, exchange_id: int, user_id: int) -> Exchange:
        exchange = await self._get_loaded(exchange_id)
        if not exchange.is_participant(user_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not a participant in this exchange",
            )
        return exchange

    async def list_exchanges(
        self, user_id: int, status_filter: ExchangeStatus | None = None, limit: int = 50
    ) -> list[Exchange]:
        query = self._exchange_query().where(
            or_(Exchange.helper_id == user_id, Exchange.requester_id == user_id)
        )
        if status_filter is not None:
            query = query.where(Exchange.status == status_filter)

        result = await self.db.execute(
            query.order_by(Exchange.created_at.desc(), Exchange.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_status(self, user_id: int) -> ExchangeCounts:
        result = await self.db.execute(
            select(Exchange.status, func.count(Exchange.id))
            .where(or_(Exchange.helper_id == user_id, Exchange.requester_id == user_id))
            .group_by(Exchange.status)
        )

        counts = {ExchangeStatus(row[0]).value: row[1] for row in result.all()}
        return ExchangeCounts(all=sum(counts.values()), **counts)

    async def update_status(
        self, exchange_id: int, user_id: int, target: ExchangeStatus
    ) -> Exchange:
        exchange = await self.get_exchange(exchange_id, user_id)

        current = ExchangeStatus(exchange.status)
        role = derive_role(
            user_id, exchange.helper_id, exchange.requester_id, exchange.post.type
        )

        if not can_transition(current, target, role):
            ActivityLogger.log_exchange_transition(
                exchange_id, user_id, role.value, current.value, target.value,
                success=False, reason="not_permitted",
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot change exchange from {current.value} to {target.value} as {role.value}",
            )

        try:
            # Compare-and-set so a racing request cannot pass the same edge twice.
            result = await self.db.execute(
                update(Exchange)
                .where(Exchange.id == exchange_id, Exchange.status == current)
                .values(status=target, updated_at=utcnow())
            )
            if result.rowcount == 0:
                await self.db.rollback()
                ActivityLogger.log_exchange_transition(
                    exchange_id, user_id, role.value, current.value, target.value,
                    success=False, reason="concurrent_update",
                )
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Exchange was updated by someone else, please reload",
                )

            if target == ExchangeStatus.COMPLETED:
                await increment_trust_level(self.db, exchange.helper_id)
                await increment_trust_level(self.db, exchange.requester_id)

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update exchange {exchange_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update exchange",
            )

        ActivityLogger.log_exchange_transition(
            exchange_id, user_id, role.value, current.value, target.value, success=True
        )
        websocket_manager.notify_exchange(
            "exchange_updated",
            exchange_id,
            target.value,
            (exchange.helper_id, exchange.requester_id),
        )

        return await self._get_loaded(exchange_id, refresh=True)
