from sqlalchemy import Boolean, Column, DateTime, Float, JSON, String, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.core.database import Base


class ContentInteraction(Base):
    __tablename__ = "content_interactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)  # Owned by the external identity service
    content_id = Column(String(255), nullable=False, index=True)
    content_type = Column(String(50), nullable=False, default="video")

    # Watch facts (seconds)
    watch_duration = Column(Float, nullable=False, default=0)
    total_duration = Column(Float, nullable=False, default=0)  # 0 when the duration is unknown
    watch_completion_rate = Column(Float, nullable=False, default=0)  # 0-100, derived from the two above
    attention_score = Column(Float, nullable=False, default=0)  # 0-100, computed client-side

    # Engagement flags
    liked = Column(Boolean, nullable=False, default=False)
    shared = Column(Boolean, nullable=False, default=False)
    skipped = Column(Boolean, nullable=False, default=False)

    # Taxonomy
    tags = Column(JSON, nullable=False, default=list)
    category = Column(String(100), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # One row per user-content pair; later writes replace it
    __table_args__ = (UniqueConstraint('user_id', 'content_id', name='unique_user_content_interaction'),)

    def __repr__(self):
        return f"<ContentInteraction(user_id={self.user_id}, content_id={self.content_id}, completion={self.watch_completion_rate})>"
