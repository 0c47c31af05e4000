from typing import Iterable, List, Optional, Tuple

from app.models.user_preference import DEFAULT_ENGAGEMENT_SCORE
from app.schemas.interaction import TrackInteractionRequest

FOCUS_DECAY = 0.9
ATTENTION_WEIGHT = 0.1
COMPLETION_BONUS_THRESHOLD = 80  # strictly greater than
LIKE_BOOST = 2
SHARE_BOOST = 3
COMPLETION_BOOST = 1
SKIP_PENALTY = 1
ENGAGEMENT_MIN = 0
ENGAGEMENT_MAX = 100


class PreferenceScoringService:
    """Pure scoring rules behind interaction tracking and the rolling preference profile"""

    @staticmethod
    def calculate_completion_rate(watch_duration: float, total_duration: float) -> float:
        """Percentage of the item watched (0 when the total duration is unknown)"""
        if total_duration > 0:
            return watch_duration / total_duration * 100
        return 0.0

    @staticmethod
    def resolve_flags(liked: bool, shared: bool, action: str) -> Tuple[bool, bool]:
        """Apply explicit like/unlike/share actions over the caller-supplied flags"""
        if action == "like":
            liked = True
        elif action == "unlike":
            liked = False
        if action == "share":
            shared = True
        return liked, shared

    @staticmethod
    def incremental_mean(current_avg: float, sample: float, count: int) -> float:
        """Fold one sample into a running mean; ``count`` already includes the sample"""
        return (current_avg * (count - 1) + sample) / count

    @staticmethod
    def update_focus(current_focus: float, attention_score: float) -> float:
        """Exponentially weighted focus score; a zero attention score leaves it untouched"""
        if attention_score > 0:
            return current_focus * FOCUS_DECAY + attention_score * ATTENTION_WEIGHT
        return current_focus

    @staticmethod
    def calculate_engagement_boost(
        event: TrackInteractionRequest,
        watch_completion_rate: float
    ) -> int:
        """Additive engagement change for one event (may be negative)"""
        boost = 0
        if event.liked or event.action == "like":
            boost += LIKE_BOOST
        if event.shared or event.action == "share":
            boost += SHARE_BOOST
        if watch_completion_rate > COMPLETION_BONUS_THRESHOLD:
            boost += COMPLETION_BOOST
        if event.skipped:
            boost -= SKIP_PENALTY
        return boost

    @staticmethod
    def clamp_engagement(score: float) -> float:
        return max(ENGAGEMENT_MIN, min(ENGAGEMENT_MAX, score))

    @staticmethod
    def apply_feedback(
        liked_tags: List[str],
        disliked_tags: List[str],
        preferred_categories: List[str],
        tags: Iterable[str],
        category: Optional[str],
        feedback: Optional[str]
    ) -> Tuple[List[str], List[str], List[str]]:
        """
        Move the item's tags and category between the liked and disliked sets.

        "more" adds ``tags + [category]`` to liked_tags, strips them from
        disliked_tags and marks the category preferred; "less" is the mirror
        image and un-prefers the category. Without both a feedback direction
        and a category all three lists come back unchanged.

        Returns:
            (liked_tags, disliked_tags, preferred_categories) as new lists
        """
        liked = list(liked_tags)
        disliked = list(disliked_tags)
        preferred = list(preferred_categories)

        if not feedback or not category:
            return liked, disliked, preferred

        signal = list(dict.fromkeys([*tags, category]))

        if feedback == "more":
            liked = list(dict.fromkeys([*liked, *signal]))
            disliked = [t for t in disliked if t not in signal]
            if category not in preferred:
                preferred.append(category)
        elif feedback == "less":
            disliked = list(dict.fromkeys([*disliked, *signal]))
            liked = [t for t in liked if t not in signal]
            preferred = [c for c in preferred if c != category]

        return liked, disliked, preferred

    @staticmethod
    def push_recent(last_seen: List[str], content_id: str, limit: int) -> List[str]:
        """Move ``content_id`` to the front of the recency list and cap its length"""
        return [content_id, *[c for c in last_seen if c != content_id]][:limit]

    @staticmethod
    def compute_profile_update(
        profile,
        event: TrackInteractionRequest,
        watch_completion_rate: float,
        last_seen_limit: int = 50
    ) -> dict:
        """Recompute every profile field for one recorded interaction.

        ``profile`` is any object exposing the UserPreference columns; missing
        values fall back to the column defaults. Returns the complete set of
        new column values, ready to be persisted as a whole.
        """
        total_views = (profile.total_content_views or 0) + 1
        current_avg = profile.avg_watch_time or 0.0
        current_focus = profile.focus_score or 0.0
        current_engagement = profile.engagement_score
        if current_engagement is None:
            current_engagement = DEFAULT_ENGAGEMENT_SCORE

        boost = PreferenceScoringService.calculate_engagement_boost(event, watch_completion_rate)

        liked_tags, disliked_tags, preferred_categories = PreferenceScoringService.apply_feedback(
            profile.liked_tags or [],
            profile.disliked_tags or [],
            profile.preferred_categories or [],
            event.tags,
            event.category,
            event.feedback,
        )

        return {
            "total_content_views": total_views,
            "avg_watch_time": PreferenceScoringService.incremental_mean(
                current_avg, event.watch_duration, total_views
            ),
            "focus_score": PreferenceScoringService.update_focus(current_focus, event.attention_score),
            "engagement_score": PreferenceScoringService.clamp_engagement(current_engagement + boost),
            "liked_tags": liked_tags,
            "disliked_tags": disliked_tags,
            "preferred_categories": preferred_categories,
            "last_seen_content": PreferenceScoringService.push_recent(
                profile.last_seen_content or [], event.content_id, last_seen_limit
            ),
        }
