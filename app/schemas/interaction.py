from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime
import uuid

InteractionAction = Literal['update', 'like', 'unlike', 'share', 'feedback']
FeedbackDirection = Literal['more', 'less']


class TrackInteractionRequest(BaseModel):
    """Body of a tracking call; field names follow the web client's camelCase"""
    content_id: str = Field(..., alias="contentId", min_length=1, max_length=255)
    content_type: str = Field(default="video", alias="contentType", max_length=50)
    watch_duration: float = Field(default=0, alias="watchDuration", ge=0)
    total_duration: float = Field(default=0, alias="totalDuration", ge=0)
    attention_score: float = Field(default=0, alias="attentionScore", ge=0, le=100)
    liked: bool = False
    shared: bool = False
    skipped: bool = False
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = Field(default=None, max_length=100)
    action: InteractionAction = "update"
    feedback: Optional[FeedbackDirection] = None

    class Config:
        populate_by_name = True

    @field_validator('content_id')
    @classmethod
    def content_id_must_not_be_blank(cls, v):
        """contentId identifies the row; whitespace-only ids are rejected"""
        if not v.strip():
            raise ValueError('contentId cannot be empty or just whitespace')
        return v

    @field_validator('tags')
    @classmethod
    def drop_duplicate_tags(cls, v):
        """Tags are a set; keep first occurrence order"""
        return list(dict.fromkeys(v))


class InteractionSummary(BaseModel):
    content_id: str = Field(..., alias="contentId")
    watch_completion_rate: float = Field(..., alias="watchCompletionRate")
    attention_score: float = Field(..., alias="attentionScore")

    class Config:
        populate_by_name = True


class TrackInteractionResponse(BaseModel):
    success: bool = True
    interaction: InteractionSummary


class ContentInteraction(BaseModel):
    id: uuid.UUID
    content_id: str
    content_type: str
    watch_duration: float
    total_duration: float
    watch_completion_rate: float
    attention_score: float
    liked: bool
    shared: bool
    skipped: bool
    tags: List[str]
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InteractionListResponse(BaseModel):
    """Page of the caller's interactions"""
    items: List[ContentInteraction]
    total: int
    skip: int
    limit: int
