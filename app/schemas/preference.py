from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
import uuid


class UserPreference(BaseModel):
    """Preference profile as consumed by feed ranking and reward gating"""
    user_id: uuid.UUID
    avg_watch_time: float
    total_content_views: int
    focus_score: float
    engagement_score: float
    liked_tags: List[str]
    disliked_tags: List[str]
    preferred_categories: List[str]
    last_seen_content: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
