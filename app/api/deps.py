from typing import Optional
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import structlog

from app.core.security import resolve_user_id
from app.services.attention_service import AttentionService
from app.services.interaction_service import InteractionService

# Missing credentials are reported as 401 below instead of HTTPBearer's default
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> uuid.UUID:
    """Resolve the acting user's id from the bearer credential"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    user_id = resolve_user_id(credentials.credentials)
    if user_id is None:
        raise credentials_exception

    structlog.contextvars.bind_contextvars(user_id=str(user_id))
    return user_id


def get_interaction_service() -> InteractionService:
    return InteractionService()


def get_attention_service() -> AttentionService:
    return AttentionService()
