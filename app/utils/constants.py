from app.models.exchange import ExchangeStatus
from app.models.post import URGENCY_RANK, PostCategory, PostType, Urgency

CATEGORIES = [
    {"id": PostCategory.SKILL.value, "name": "Skill", "emoji": "🛠️"},
    {"id": PostCategory.TOOL.value, "name": "Tool", "emoji": "🔧"},
    {"id": PostCategory.GOOD.value, "name": "Good", "emoji": "📦"},
    {"id": PostCategory.TIME.value, "name": "Time", "emoji": "⏰"},
    {"id": PostCategory.SPACE.value, "name": "Space", "emoji": "🏠"},
]

URGENCY_LEVELS = [
    {
        "id": level.value,
        "name": level.value.capitalize(),
        "rank": URGENCY_RANK[level],
        "emoji": emoji,
    }
    for level, emoji in (
        (Urgency.LOW, "🟢"),
        (Urgency.MEDIUM, "🟡"),
        (Urgency.HIGH, "🟠"),
        (Urgency.EMERGENCY, "🔴"),
    )
]

POST_TYPES = [
    {"id": PostType.OFFER.value, "name": "Offer", "description": "I can help"},
    {"id": PostType.NEED.value, "name": "Need", "description": "I need help"},
]

EXCHANGE_STATUSES = [
    {"id": ExchangeStatus.PENDING.value, "name": "Pending"},
    {"id": ExchangeStatus.ACCEPTED.value, "name": "Accepted"},
    {"id": ExchangeStatus.COMPLETED.value, "name": "Completed"},
    {"id": ExchangeStatus.CANCELLED.value, "name": "Cancelled"},
]

EMERGENCY_TEMPLATES = [
    {
        "id": "medical",
        "icon": "🚑",
        "title": "Medical Emergency",
        "description": "Need immediate medical help",
        "template": "Medical emergency - need immediate assistance",
    },
    {
        "id": "breakdown",
        "icon": "🔧",
        "title": "Vehicle Breakdown",
        "description": "Car/bike broken down",
        "template": "Vehicle breakdown - need roadside assistance",
    },
    {
        "id": "safety",
        "icon": "🛡️",
        "title": "Safety Concern",
        "description": "Personal safety issue",
        "template": "Safety concern - need help or escort",
    },
    {
        "id": "other",
        "icon": "🚨",
        "title": "Other Emergency",
        "description": "Other urgent situation",
        "template": "Emergency situation - need immediate help",
    },
]


def get_emergency_template(template_id: str) -> dict[str, str] | None:
    return next((t for t in EMERGENCY_TEMPLATES if t["id"] == template_id), None)
