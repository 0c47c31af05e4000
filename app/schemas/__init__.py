from .interaction import (
    TrackInteractionRequest,
    TrackInteractionResponse,
    InteractionSummary,
    ContentInteraction,
    InteractionListResponse,
)
from .preference import UserPreference
from .attention import AttentionValidationRequest, AttentionChecks, AttentionVerdict

__all__ = [
    "TrackInteractionRequest", "TrackInteractionResponse", "InteractionSummary",
    "ContentInteraction", "InteractionListResponse",
    "UserPreference",
    "AttentionValidationRequest", "AttentionChecks", "AttentionVerdict",
]
