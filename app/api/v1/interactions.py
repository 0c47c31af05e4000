import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_current_user_id, get_interaction_service
from app.schemas.interaction import (
    TrackInteractionRequest,
    TrackInteractionResponse,
    InteractionListResponse,
)
from app.services.interaction_service import InteractionService

router = APIRouter()


@router.post("/track", response_model=TrackInteractionResponse)
async def track_interaction(
    payload: TrackInteractionRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    service: InteractionService = Depends(get_interaction_service),
):
    """Record one view of a content item and update the viewer's preference profile"""
    summary = await service.record_interaction(db, user_id, payload)
    return TrackInteractionResponse(success=True, interaction=summary)


@router.get("", response_model=InteractionListResponse)
async def list_my_interactions(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    service: InteractionService = Depends(get_interaction_service),
):
    """List the caller's interactions, most recently updated first"""
    return await service.list_interactions(db, user_id, skip=skip, limit=limit)
