from .preference_scoring_service import PreferenceScoringService
from .interaction_service import InteractionService
from .attention_service import AttentionService

__all__ = [
    "PreferenceScoringService",
    "InteractionService",
    "AttentionService",
]
