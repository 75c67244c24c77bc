from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .auth import USERNAME_PATTERN


def normalize_skills(raw: str | list[str] | None) -> str:
    """Collapse free-form skill input into trimmed, de-duplicated comma tags."""
    if not raw:
        return ""

    parts = raw if isinstance(raw, list) else raw.split(",")

    seen: set[str] = set()
    tags: list[str] = []
    for part in parts:
        tag = part.strip()
        if tag and tag.lower() not in seen:
            seen.add(tag.lower())
            tags.append(tag)

    return ", ".join(tags)


class ProfileUpdate(BaseModel):
    """Full replacement of the owner-editable profile fields.

    Every field is listed with its default so an upsert never depends on
    which keys a client happened to send. ``trust_level`` and ``verified``
    are deliberately absent.
    """

    username: str = Field(..., min_length=2, max_length=50, pattern=USERNAME_PATTERN)
    location: str | None = Field(None, max_length=200)
    bio: str | None = Field(None, max_length=1000)
    skills: str = Field("", max_length=1000)
    phone: str | None = Field(None, max_length=30)
    emergency_contact: str | None = Field(None, max_length=200)
    availability: str | None = Field(None, max_length=200)

    @field_validator("skills", mode="before")
    @classmethod
    def validate_skills(cls, v: str | list[str] | None) -> str:
        return normalize_skills(v)

    @field_validator("location", "bio", "phone", "emergency_contact", "availability")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    trust_level: int = 0
    verified: bool = False


class ProfilePublic(ProfileSummary):
    location: str | None = None
    bio: str | None = None
    skills: str = ""
    availability: str | None = None


class ProfileRead(ProfilePublic):
    phone: str | None = None
    emergency_contact: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
