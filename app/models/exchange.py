from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base
from .types import UTCDateTime, str_enum


class ExchangeStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


OPEN_EXCHANGE_STATUSES = (ExchangeStatus.PENDING, ExchangeStatus.ACCEPTED)

_OPEN_EXCHANGE_CLAUSE = text("status IN ('pending', 'accepted')")


class ExchangeRole(str, Enum):
    PROVIDER = "provider"
    HELPER = "helper"
    REQUESTER = "requester"


class Exchange(Base):
    __tablename__ = "exchanges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    helper_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    requester_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )

    status: Mapped[ExchangeStatus] = mapped_column(
        str_enum(ExchangeStatus, "exchangestatus"),
        default=ExchangeStatus.PENDING,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, server_default=func.now())

    post: Mapped["Post"] = relationship("Post", back_populates="exchanges")
    helper: Mapped["Profile"] = relationship("Profile", foreign_keys=[helper_id])
    requester: Mapped["Profile"] = relationship("Profile", foreign_keys=[requester_id])

    __table_args__ = (
        CheckConstraint("helper_id <> requester_id", name="ck_exchanges_distinct_parties"),
        Index("idx_exchange_helper", "helper_id", "status"),
        Index("idx_exchange_requester", "requester_id", "status"),
        Index("idx_exchange_post", "post_id"),
        # At most one open exchange per post and pair of parties.
        Index(
            "uq_exchange_open_parties",
            "post_id",
            "helper_id",
            "requester_id",
            unique=True,
            postgresql_where=_OPEN_EXCHANGE_CLAUSE,
            sqlite_where=_OPEN_EXCHANGE_CLAUSE,
        ),
    )

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.helper_id, self.requester_id)
