from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.models.exchange import ExchangeRole, ExchangeStatus
from app.models.post import PostCategory, PostType, Urgency


class ExchangeStatusUpdate(BaseModel):
    status: ExchangeStatus


class ExchangePostSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: PostType
    category: PostCategory
    urgency: Urgency
    location: str


class ExchangeParticipant(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    trust_level: int = 0


class ExchangeRead(BaseModel):
    id: int
    status: ExchangeStatus
    post: ExchangePostSummary
    helper: ExchangeParticipant
    requester: ExchangeParticipant
    role: ExchangeRole
    counterpart: ExchangeParticipant
    can_accept: bool
    can_complete: bool
    can_cancel: bool
    created_at: datetime
    updated_at: datetime


class ExchangeCounts(BaseModel):
    all: int = 0
    pending: int = 0
    accepted: int = 0
    completed: int = 0
    cancelled: int = 0
