from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.verification_request import VerificationMethod, VerificationStatus


class VerificationCreate(BaseModel):
    method: VerificationMethod
    details: str | None = Field(None, max_length=1000)


class VerificationReview(BaseModel):
    approve: bool
    note: str | None = Field(None, max_length=500)


class VerificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    method: VerificationMethod
    details: str | None = None
    status: VerificationStatus
    reviewed_at: datetime | None = None
    created_at: datetime | None = None
