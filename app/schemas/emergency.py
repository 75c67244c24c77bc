from pydantic import BaseModel, Field, field_validator


class EmergencyCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    location: str = Field(..., min_length=1, max_length=200)
    template_id: str | None = Field(None, max_length=30)

    @field_validator("title", "location")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class EmergencyTemplate(BaseModel):
    id: str
    icon: str
    title: str
    description: str
    template: str
