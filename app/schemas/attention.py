from pydantic import BaseModel, Field
from typing import Optional, List


class AttentionValidationRequest(BaseModel):
    """Signals collected by the client while a rewarded item was playing"""
    content_id: str = Field(..., alias="contentId", min_length=1, max_length=255)
    promo_id: Optional[str] = Field(default=None, alias="promoId", max_length=255)
    attention_score: float = Field(default=0, alias="attentionScore", ge=0, le=100)
    watch_duration: float = Field(default=0, alias="watchDuration", ge=0)
    total_duration: float = Field(default=0, alias="totalDuration", ge=0)
    frames_detected: int = Field(default=0, alias="framesDetected", ge=0)
    total_frames: int = Field(default=0, alias="totalFrames", ge=0)

    class Config:
        populate_by_name = True


class AttentionChecks(BaseModel):
    attention_passed: bool = Field(..., alias="attentionPassed")
    watch_duration_passed: bool = Field(..., alias="watchDurationPassed")
    frames_valid: bool = Field(..., alias="framesValid")

    class Config:
        populate_by_name = True


class AttentionVerdict(BaseModel):
    """Reward-eligibility verdict for one view"""
    success: bool = True
    validated: bool
    attention_score: float = Field(..., alias="attentionScore")
    watch_percentage: int = Field(..., alias="watchPercentage")
    checks: AttentionChecks
    message: str
    reasons: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
