from .auth import TokenResponse, UserLogin, UserPrivate, UserRegister
from .common import ErrorResponse
from .dashboard import ActivityItem, DashboardMetrics, DashboardRead
from .emergency import EmergencyCreate, EmergencyTemplate
from .exchange import (
    ExchangeCounts,
    ExchangeParticipant,
    ExchangePostSummary,
    ExchangeRead,
    ExchangeStatusUpdate,
)
from .meta import ConstantsResponse
from .post import EmergencyPostRead, PostCreate, PostFilters, PostRead
from .profile import ProfilePublic, ProfileRead, ProfileSummary, ProfileUpdate
from .verification import VerificationCreate, VerificationRead, VerificationReview

__all__ = [
    # Auth
    "UserLogin",
    "UserRegister",
    "UserPrivate",
    "TokenResponse",
    # Common
    "ErrorResponse",
    # Profiles
    "ProfileUpdate",
    "ProfileSummary",
    "ProfilePublic",
    "ProfileRead",
    # Posts
    "PostCreate",
    "PostFilters",
    "PostRead",
    "EmergencyPostRead",
    "EmergencyCreate",
    "EmergencyTemplate",
    # Exchanges
    "ExchangeStatusUpdate",
    "ExchangePostSummary",
    "ExchangeParticipant",
    "ExchangeRead",
    "ExchangeCounts",
    # Dashboard
    "DashboardMetrics",
    "ActivityItem",
    "DashboardRead",
    # Verification
    "VerificationCreate",
    "VerificationReview",
    "VerificationRead",
    # Meta
    "ConstantsResponse",
]
