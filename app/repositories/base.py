"""
Base repository implementing the shared write paths using SQLAlchemy 2.0.

Interaction and preference repositories both persist rows that are looked up
by an owner key rather than by primary key, so this base only carries the
operations that are truly shared: inserting and replacing
field values on a loaded instance. Errors are logged and re-raised; deciding
whether a failure is fatal is left to the service layer.
"""

from __future__ import annotations
from typing import Generic, TypeVar, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

# Generic type variable for the model
T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic base repository for keyed rows.

    Type Parameters:
        T: The SQLAlchemy model type this repository manages

    Example:
        class PreferenceRepository(BaseRepository[UserPreference]):
            def __init__(self):
                super().__init__(UserPreference)
    """

    def __init__(self, model: Type[T]):
        """
        Initialize the repository with a model class.

        Args:
            model: The SQLAlchemy model class to manage
        """
        self.model = model

    async def create(
        self,
        db: AsyncSession,
        obj_in: dict
    ) -> T:
        """
        Insert a new record and flush it so server defaults are loaded.

        Args:
            db: Active database session
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance

        Raises:
            IntegrityError: If a unique key is already taken (e.g. a concurrent insert won)

        Example:
            prefs = await repo.create(db, {"user_id": user_id})
            await db.commit()
        """
        try:
            db_obj = self.model(**obj_in)
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"Integrity error creating {self.model.__name__}: {e}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}")
            raise

    async def replace(
        self,
        db: AsyncSession,
        db_obj: T,
        obj_in: dict
    ) -> T:
        """
        Overwrite fields of an existing record.

        Every key in ``obj_in`` is written, including falsy values, so callers
        pass the complete row when they want replace rather than merge.

        Args:
            db: Active database session
            db_obj: Existing model instance to update
            obj_in: Dictionary of field values to write

        Returns:
            Updated model instance
        """
        try:
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.model.__name__}: {e}")
            raise
