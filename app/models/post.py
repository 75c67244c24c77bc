from datetime import datetime
from enum import Enum

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base
from .types import UTCDateTime, str_enum


class PostType(str, Enum):
    OFFER = "offer"
    NEED = "need"


class PostCategory(str, Enum):
    SKILL = "skill"
    TOOL = "tool"
    GOOD = "good"
    TIME = "time"
    SPACE = "space"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


class PostStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


URGENCY_RANK: dict[Urgency, int] = {
    Urgency.LOW: 1,
    Urgency.MEDIUM: 2,
    Urgency.HIGH: 3,
    Urgency.EMERGENCY: 4,
}


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )

    type: Mapped[PostType] = mapped_column(str_enum(PostType, "posttype"), nullable=False)
    category: Mapped[PostCategory] = mapped_column(
        str_enum(PostCategory, "postcategory"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    urgency: Mapped[Urgency] = mapped_column(
        str_enum(Urgency, "urgency"), default=Urgency.LOW, nullable=False
    )
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    availability: Mapped[str | None] = mapped_column(String(200))
    status: Mapped[PostStatus] = mapped_column(
        str_enum(PostStatus, "poststatus"), default=PostStatus.ACTIVE, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, server_default=func.now())

    author: Mapped["Profile"] = relationship("Profile", back_populates="posts")
    exchanges: Mapped[list["Exchange"]] = relationship(
        "Exchange", back_populates="post"
    )

    __table_args__ = (
        Index("idx_posts_status_created", "status", "created_at"),
        Index("idx_posts_urgency_status", "urgency", "status"),
        Index("idx_posts_user", "user_id"),
    )
