# Repositories package
from .base import BaseRepository
from .interaction_repository import InteractionRepository
from .preference_repository import PreferenceRepository

__all__ = [
    "BaseRepository",
    "InteractionRepository",
    "PreferenceRepository",
]
