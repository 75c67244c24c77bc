from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base
from .types import UTCDateTime


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    location: Mapped[str | None] = mapped_column(String(200))
    bio: Mapped[str | None] = mapped_column(Text)
    skills: Mapped[str] = mapped_column(Text, default="", nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    emergency_contact: Mapped[str | None] = mapped_column(String(200))
    availability: Mapped[str | None] = mapped_column(String(200))

    trust_level: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime, onupdate=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="profile")
    posts: Mapped[list["Post"]] = relationship("Post", back_populates="author")

    __table_args__ = (
        CheckConstraint("trust_level >= 0", name="ck_profiles_trust_level_positive"),
    )
