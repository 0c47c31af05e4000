import uuid

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user_id, get_attention_service
from app.schemas.attention import AttentionValidationRequest, AttentionVerdict
from app.services.attention_service import AttentionService

router = APIRouter()


@router.post("/validate", response_model=AttentionVerdict)
async def validate_attention(
    payload: AttentionValidationRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: AttentionService = Depends(get_attention_service),
):
    """Decide whether an attention-tracked view is eligible for a reward"""
    return service.validate(user_id, payload)
