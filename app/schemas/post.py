from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.post import PostCategory, PostStatus, PostType, Urgency

from .profile import ProfileSummary


def _required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class PostCreate(BaseModel):
    type: PostType = PostType.OFFER
    category: PostCategory = PostCategory.SKILL
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    urgency: Urgency = Urgency.LOW
    location: str = Field(..., min_length=1, max_length=200)
    availability: str | None = Field(None, max_length=200)

    @field_validator("title", "location")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("description", "availability")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class PostFilters(BaseModel):
    type: PostType | None = None
    category: PostCategory | None = None
    urgency: Urgency | None = None
    search: str | None = Field(None, max_length=100)

    @field_validator("search")
    @classmethod
    def normalize_search(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: PostType
    category: PostCategory
    title: str
    description: str | None = None
    urgency: Urgency
    location: str
    availability: str | None = None
    status: PostStatus
    created_at: datetime

    author: ProfileSummary | None = None


class EmergencyPostAuthor(ProfileSummary):
    phone: str | None = None
    emergency_contact: str | None = None


class EmergencyPostRead(PostRead):
    author: EmergencyPostAuthor | None = None
