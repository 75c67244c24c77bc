from datetime import datetime

from pydantic import BaseModel


class DashboardMetrics(BaseModel):
    total_posts: int = 0
    active_exchanges: int = 0
    completed_helps: int = 0
    community_impact: int = 0
    trust_level: int = 0


class ActivityItem(BaseModel):
    id: str
    type: str
    title: str
    time: datetime
    icon: str


class DashboardRead(BaseModel):
    metrics: DashboardMetrics
    recent_activity: list[ActivityItem]
