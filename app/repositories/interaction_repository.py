"""
Repository for per-(user, content) interaction rows.

A user has at most one row per content item. Writes go through ``upsert``,
a single INSERT ... ON CONFLICT DO UPDATE that replaces every tracked field
instead of merging, so the newest call always wins even when two first
writes for the same pair race.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy import select, func, desc
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.content_interaction import ContentInteraction
from .base import BaseRepository

logger = logging.getLogger(__name__)

# Fields a tracking call owns; all of them are rewritten on every upsert
INTERACTION_FIELDS = (
    "content_type",
    "watch_duration",
    "total_duration",
    "watch_completion_rate",
    "attention_score",
    "liked",
    "shared",
    "skipped",
    "tags",
    "category",
)


class InteractionRepository(BaseRepository[ContentInteraction]):
    """Repository for ContentInteraction keyed by (user_id, content_id)."""

    def __init__(self):
        """Initialize with ContentInteraction model."""
        super().__init__(ContentInteraction)

    async def get_for_pair(
        self,
        db: AsyncSession,
        user_id: UUID,
        content_id: str
    ) -> Optional[ContentInteraction]:
        """
        Get the interaction row for one user and content item.

        Args:
            db: Active database session
            user_id: UUID of the user
            content_id: Identifier of the content item

        Returns:
            The row if the user has interacted with the content, None otherwise
        """
        try:
            stmt = select(ContentInteraction).where(
                ContentInteraction.user_id == user_id,
                ContentInteraction.content_id == content_id
            ).execution_options(populate_existing=True)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching interaction for user {user_id} on content {content_id}: {e}")
            raise

    async def upsert(
        self,
        db: AsyncSession,
        user_id: UUID,
        content_id: str,
        values: dict
    ) -> ContentInteraction:
        """
        Create or fully replace the interaction row for (user_id, content_id).

        Fields missing from ``values`` are reset to their defaults rather than
        kept from the previous row.

        Args:
            db: Active database session
            user_id: UUID of the user
            content_id: Identifier of the content item
            values: Field values keyed by column name

        Returns:
            The stored row

        Example:
            row = await repo.upsert(db, user_id, "c1", {"watch_duration": 9.0, "total_duration": 10.0})
            await db.commit()
        """
        row = {
            "content_type": "video",
            "watch_duration": 0.0,
            "total_duration": 0.0,
            "watch_completion_rate": 0.0,
            "attention_score": 0.0,
            "liked": False,
            "shared": False,
            "skipped": False,
            "tags": [],
            "category": None,
        }
        row.update({k: v for k, v in values.items() if k in INTERACTION_FIELDS})

        insert = sqlite.insert if db.bind.dialect.name == "sqlite" else postgresql.insert
        stmt = insert(ContentInteraction).values(user_id=user_id, content_id=content_id, **row)
        stmt = stmt.on_conflict_do_update(
            index_elements=[ContentInteraction.user_id, ContentInteraction.content_id],
            set_={**row, "updated_at": func.now()},
        )

        try:
            await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Error upserting interaction for user {user_id} on content {content_id}: {e}")
            raise

        return await self.get_for_pair(db, user_id, content_id)

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        skip: int = 0,
        limit: int = 20
    ) -> tuple[list[ContentInteraction], int]:
        """
        Page through a user's interactions, most recently updated first.

        Args:
            db: Active database session
            user_id: UUID of the user
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return

        Returns:
            Tuple of (list of rows, total count for the user)
        """
        try:
            stmt = (
                select(ContentInteraction)
                .where(ContentInteraction.user_id == user_id)
                .order_by(desc(ContentInteraction.updated_at), desc(ContentInteraction.created_at))
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(stmt)
            items = list(result.scalars().all())

            count_stmt = (
                select(func.count(ContentInteraction.id))
                .where(ContentInteraction.user_id == user_id)
            )
            count_result = await db.execute(count_stmt)
            total = count_result.scalar_one()

            return items, total

        except SQLAlchemyError as e:
            logger.error(f"Error listing interactions for user {user_id}: {e}")
            raise
