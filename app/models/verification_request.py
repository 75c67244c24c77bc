from datetime import datetime
from enum import Enum

from sqlalchemy import ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base
from .types import UTCDateTime, str_enum


class VerificationMethod(str, Enum):
    PHONE = "phone"
    ID_DOCUMENT = "id_document"
    COMMUNITY_REFERENCE = "community_reference"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


_PENDING_CLAUSE = text("status = 'pending'")


class VerificationRequest(Base):
    __tablename__ = "verification_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    method: Mapped[VerificationMethod] = mapped_column(
        str_enum(VerificationMethod, "verificationmethod", length=30), nullable=False
    )
    details: Mapped[str | None] = mapped_column(Text)
    status: Mapped[VerificationStatus] = mapped_column(
        str_enum(VerificationStatus, "verificationstatus"),
        default=VerificationStatus.PENDING,
        nullable=False,
    )
    reviewed_by: Mapped[int | None] = mapped_column(Integer)
    reviewed_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, server_default=func.now())

    profile: Mapped["Profile"] = relationship("Profile")

    __table_args__ = (
        Index("idx_verification_user_status", "user_id", "status"),
        # One pending request per user.
        Index(
            "uq_verification_pending_user",
            "user_id",
            unique=True,
            postgresql_where=_PENDING_CLAUSE,
            sqlite_where=_PENDING_CLAUSE,
        ),
    )
