from fastapi import APIRouter

from app.schemas.emergency import EmergencyTemplate
from app.schemas.meta import ConstantsResponse
from app.utils.constants import (
    CATEGORIES,
    EMERGENCY_TEMPLATES,
    EXCHANGE_STATUSES,
    POST_TYPES,
    URGENCY_LEVELS,
)

router = APIRouter()


@router.get("/constants", response_model=ConstantsResponse)
async def get_constants() -> ConstantsResponse:
    return ConstantsResponse(
        categories=CATEGORIES,
        urgency_levels=URGENCY_LEVELS,
        post_types=POST_TYPES,
        exchange_statuses=EXCHANGE_STATUSES,
        emergency_templates=[EmergencyTemplate(**t) for t in EMERGENCY_TEMPLATES],
    )
