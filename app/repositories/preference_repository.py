"""
Repository for the one-per-user preference profile.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.user_preference import UserPreference, DEFAULT_ENGAGEMENT_SCORE
from .base import BaseRepository

logger = logging.getLogger(__name__)


def default_profile_values() -> dict:
    """Column values of a freshly created profile."""
    return {
        "avg_watch_time": 0.0,
        "total_content_views": 0,
        "focus_score": 0.0,
        "engagement_score": DEFAULT_ENGAGEMENT_SCORE,
        "liked_tags": [],
        "disliked_tags": [],
        "preferred_categories": [],
        "last_seen_content": [],
    }


class PreferenceRepository(BaseRepository[UserPreference]):
    """Repository for UserPreference keyed by user_id."""

    def __init__(self):
        """Initialize with UserPreference model."""
        super().__init__(UserPreference)

    async def get_by_user(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[UserPreference]:
        """
        Get a user's preference profile.

        Args:
            db: Active database session
            user_id: UUID of the user

        Returns:
            The profile, or None if the user has none yet
        """
        try:
            stmt = select(UserPreference).where(UserPreference.user_id == user_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching preferences for user {user_id}: {e}")
            raise

    async def create_default(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> UserPreference:
        """
        Create a profile with all default values.

        Args:
            db: Active database session
            user_id: UUID of the user

        Returns:
            The new profile
        """
        return await self.create(db, {"user_id": user_id, **default_profile_values()})

    async def save(
        self,
        db: AsyncSession,
        profile: UserPreference,
        values: dict
    ) -> UserPreference:
        """
        Write recomputed profile fields.

        Args:
            db: Active database session
            profile: Loaded profile instance
            values: Complete set of recomputed fields

        Returns:
            The updated profile
        """
        return await self.replace(db, profile, values)
