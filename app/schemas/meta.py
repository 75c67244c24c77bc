from pydantic import BaseModel

from .emergency import EmergencyTemplate


class ConstantsResponse(BaseModel):
    categories: list[dict[str, str]]
    urgency_levels: list[dict[str, str | int]]
    post_types: list[dict[str, str]]
    exchange_statuses: list[dict[str, str]]
    emergency_templates: list[EmergencyTemplate]
