"""
Attention validation for reward gating.

Turns the attention, watch-time and frame-tracking signals of one view into a
reward-eligibility verdict. Nothing is persisted; the verdict is logged as a
structured event so reward issuance can be audited downstream.
"""

import math
from typing import List, Optional
from uuid import UUID

import structlog

from app.core.config import settings
from app.schemas.attention import AttentionValidationRequest, AttentionChecks, AttentionVerdict

logger = structlog.get_logger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_number(value: float) -> str:
    # 90.0 -> "90", 87.5 -> "87.5"
    return f"{value:g}"


class AttentionService:
    """Reward-eligibility rules for attention-tracked views"""

    def __init__(
        self,
        required_attention_score: Optional[float] = None,
        required_watch_percentage: Optional[float] = None,
        min_frames: Optional[int] = None
    ):
        self.required_attention_score = (
            settings.attention_required_score if required_attention_score is None else required_attention_score
        )
        self.required_watch_percentage = (
            settings.attention_required_watch_percentage if required_watch_percentage is None else required_watch_percentage
        )
        self.min_frames = settings.attention_min_frames if min_frames is None else min_frames

    @staticmethod
    def calculate_watch_percentage(watch_duration: float, total_duration: float) -> float:
        """Share of the item watched; 0 when the duration is unknown"""
        if total_duration > 0:
            return watch_duration / total_duration * 100
        return 0.0

    def validate(self, user_id: UUID, request: AttentionValidationRequest) -> AttentionVerdict:
        """
        Decide whether a view qualifies for a reward.

        All three checks must pass: attention score at or above the required
        score, watched share at or above the required percentage, and enough
        tracked frames for the attention score to be trustworthy.

        Args:
            user_id: UUID of the authenticated viewer
            request: Signals collected during playback

        Returns:
            Verdict with per-check results and a reason for each failed check
        """
        watch_percentage = self.calculate_watch_percentage(request.watch_duration, request.total_duration)
        rounded_percentage = _round_half_up(watch_percentage)

        checks = AttentionChecks(
            attention_passed=request.attention_score >= self.required_attention_score,
            watch_duration_passed=watch_percentage >= self.required_watch_percentage,
            frames_valid=request.total_frames >= self.min_frames,
        )
        validated = checks.attention_passed and checks.watch_duration_passed and checks.frames_valid

        reasons: List[str] = []
        if not checks.attention_passed:
            reasons.append(
                f"Attention score ({_format_number(request.attention_score)}%) "
                f"below {_format_number(self.required_attention_score)}%"
            )
        if not checks.watch_duration_passed:
            reasons.append(
                f"Watch time ({rounded_percentage}%) below {_format_number(self.required_watch_percentage)}%"
            )
        if not checks.frames_valid:
            reasons.append("Insufficient tracking data")

        logger.info(
            "attention_validated",
            user_id=str(user_id),
            content_id=request.content_id,
            promo_id=request.promo_id,
            attention_score=request.attention_score,
            watch_percentage=watch_percentage,
            frames_detected=request.frames_detected,
            total_frames=request.total_frames,
            validated=validated,
        )

        return AttentionVerdict(
            validated=validated,
            attention_score=request.attention_score,
            watch_percentage=rounded_percentage,
            checks=checks,
            message="Attention validated! Reward eligible." if validated else "Attention requirements not met.",
            reasons=reasons,
        )
