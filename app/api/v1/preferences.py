import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_current_user_id, get_interaction_service
from app.schemas.preference import UserPreference
from app.services.interaction_service import InteractionService

router = APIRouter()


@router.get("/me", response_model=UserPreference)
async def get_my_preferences(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    service: InteractionService = Depends(get_interaction_service),
):
    """Get the caller's preference profile (defaults until the first interaction)"""
    return await service.get_preferences(db, user_id)
