from sqlalchemy import Column, DateTime, Float, Integer, JSON
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.core.database import Base

DEFAULT_ENGAGEMENT_SCORE = 50.0


class UserPreference(Base):
    __tablename__ = "user_preferences"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True)

    # Rolling statistics
    avg_watch_time = Column(Float, nullable=False, default=0)  # Seconds, incremental mean
    total_content_views = Column(Integer, nullable=False, default=0)
    focus_score = Column(Float, nullable=False, default=0)  # EWMA of attention scores
    engagement_score = Column(Float, nullable=False, default=DEFAULT_ENGAGEMENT_SCORE)  # Clamped to 0-100

    # Explicit feedback sets (liked and disliked never overlap)
    liked_tags = Column(JSON, nullable=False, default=list)
    disliked_tags = Column(JSON, nullable=False, default=list)
    preferred_categories = Column(JSON, nullable=False, default=list)

    # Most recent first, deduplicated, capped
    last_seen_content = Column(JSON, nullable=False, default=list)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<UserPreference(user_id={self.user_id}, views={self.total_content_views}, engagement={self.engagement_score})>"
