"""
Interaction tracking service.

Records one engagement observation per (user, content) pair and folds it into
the user's rolling preference profile. The two writes have different failure
semantics:

- The interaction row is the source of truth. If it cannot be written the
  request fails with a 500 and the profile is not touched.
- The preference profile is a derived cache. Failures while loading, creating
  or saving it are logged and swallowed; the request still succeeds because
  the interaction itself was committed.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.cache import preference_lock
from app.core.config import settings
from app.repositories.interaction_repository import InteractionRepository
from app.repositories.preference_repository import PreferenceRepository, default_profile_values
from app.schemas.interaction import (
    TrackInteractionRequest,
    InteractionSummary,
    InteractionListResponse,
    ContentInteraction as ContentInteractionSchema,
)
from app.schemas.preference import UserPreference as UserPreferenceSchema
from app.services.preference_scoring_service import PreferenceScoringService

logger = logging.getLogger(__name__)


class InteractionService:
    """
    Service coordinating the interaction store and the preference store.

    Example:
        service = InteractionService()
        summary = await service.record_interaction(db, user_id, event)
    """

    def __init__(
        self,
        interaction_repo: Optional[InteractionRepository] = None,
        preference_repo: Optional[PreferenceRepository] = None
    ):
        """
        Initialize service with repositories.

        Args:
            interaction_repo: InteractionRepository instance (creates new if None)
            preference_repo: PreferenceRepository instance (creates new if None)
        """
        self.interaction_repo = interaction_repo or InteractionRepository()
        self.preference_repo = preference_repo or PreferenceRepository()

    async def record_interaction(
        self,
        db: AsyncSession,
        user_id: UUID,
        event: TrackInteractionRequest
    ) -> InteractionSummary:
        """
        Upsert the interaction row, then update the preference profile.

        Args:
            db: Active database session
            user_id: UUID of the authenticated user
            event: Validated tracking payload

        Returns:
            Summary of the stored interaction

        Raises:
            HTTPException: 500 if the interaction row could not be written
        """
        logger.info(
            "Tracking interaction: user=%s content=%s action=%s",
            user_id, event.content_id, event.action,
        )

        completion_rate = PreferenceScoringService.calculate_completion_rate(
            event.watch_duration, event.total_duration
        )
        liked, shared = PreferenceScoringService.resolve_flags(event.liked, event.shared, event.action)

        try:
            await self.interaction_repo.upsert(
                db,
                user_id,
                event.content_id,
                {
                    "content_type": event.content_type,
                    "watch_duration": event.watch_duration,
                    "total_duration": event.total_duration,
                    "watch_completion_rate": completion_rate,
                    "attention_score": event.attention_score,
                    "liked": liked,
                    "shared": shared,
                    "skipped": event.skipped,
                    "tags": list(event.tags),
                    "category": event.category,
                },
            )
            await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Interaction write failed for user {user_id} on content {event.content_id}: {e}")
            await self._rollback(db)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to record interaction"
            )

        try:
            await self.update_preferences(db, user_id, event, completion_rate)
        except Exception:
            logger.exception(f"Preference maintenance failed for user {user_id}")
            await self._rollback(db)

        logger.info(
            "Interaction tracked: user=%s content=%s action=%s",
            user_id, event.content_id, event.action,
        )

        return InteractionSummary(
            content_id=event.content_id,
            watch_completion_rate=completion_rate,
            attention_score=event.attention_score,
        )

    async def update_preferences(
        self,
        db: AsyncSession,
        user_id: UUID,
        event: TrackInteractionRequest,
        watch_completion_rate: float
    ) -> None:
        """
        Fold one interaction into the user's preference profile (best-effort).

        Loads the profile, creating it with defaults when missing, recomputes
        every field and saves the whole profile. Each storage failure is logged
        and ends maintenance for this event without raising.

        Args:
            db: Active database session
            user_id: UUID of the user
            event: The tracking payload that was just recorded
            watch_completion_rate: Completion rate computed for the interaction row
        """
        async with preference_lock(user_id):
            try:
                prefs = await self.preference_repo.get_by_user(db, user_id)
            except SQLAlchemyError as e:
                logger.error(f"Prefs fetch error for user {user_id}: {e}")
                await self._rollback(db)
                return

            if prefs is None:
                try:
                    prefs = await self.preference_repo.create_default(db, user_id)
                except SQLAlchemyError as e:
                    logger.error(f"Prefs create error for user {user_id}: {e}")
                    await self._rollback(db)
                    return

            values = PreferenceScoringService.compute_profile_update(
                prefs,
                event,
                watch_completion_rate,
                last_seen_limit=settings.last_seen_limit,
            )

            try:
                await self.preference_repo.save(db, prefs, values)
                await db.commit()
            except SQLAlchemyError as e:
                logger.error(f"Prefs update error for user {user_id}: {e}")
                await self._rollback(db)
                return

        logger.info(
            "Preferences updated: user=%s views=%s engagement=%s",
            user_id, values["total_content_views"], values["engagement_score"],
        )

    async def get_preferences(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> UserPreferenceSchema:
        """
        Read the user's profile without creating it.

        Returns the default profile when the user has not interacted yet.

        Raises:
            HTTPException: 500 if the profile could not be read
        """
        try:
            prefs = await self.preference_repo.get_by_user(db, user_id)
        except SQLAlchemyError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load preferences"
            )

        if prefs is None:
            return UserPreferenceSchema(user_id=user_id, **default_profile_values())
        return UserPreferenceSchema.model_validate(prefs)

    async def list_interactions(
        self,
        db: AsyncSession,
        user_id: UUID,
        skip: int = 0,
        limit: int = 20
    ) -> InteractionListResponse:
        """
        Page through the user's interaction rows.

        Raises:
            HTTPException: 500 if the rows could not be read
        """
        try:
            items, total = await self.interaction_repo.list_for_user(db, user_id, skip=skip, limit=limit)
        except SQLAlchemyError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load interactions"
            )

        return InteractionListResponse(
            items=[ContentInteractionSchema.model_validate(item) for item in items],
            total=total,
            skip=skip,
            limit=limit,
        )

    @staticmethod
    async def _rollback(db: AsyncSession) -> None:
        try:
            await db.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback failed: {e}")
