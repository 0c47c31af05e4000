from .content_interaction import ContentInteraction
from .user_preference import UserPreference

__all__ = ["ContentInteraction", "UserPreference"]
