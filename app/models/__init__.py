from .base import Base
from .exchange import Exchange, ExchangeRole, ExchangeStatus
from .post import Post, PostCategory, PostStatus, PostType, Urgency
from .profile import Profile
from .user import User
from .verification_request import (
    VerificationMethod,
    VerificationRequest,
    VerificationStatus,
)

__all__ = [
    "Base",
    "User",
    "Profile",
    "Post",
    "PostType",
    "PostCategory",
    "PostStatus",
    "Urgency",
    "Exchange",
    "ExchangeStatus",
    "ExchangeRole",
    "VerificationRequest",
    "VerificationMethod",
    "VerificationStatus",
]
