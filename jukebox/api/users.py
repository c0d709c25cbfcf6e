"""User API endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from jukebox.auth.session import require_session
from jukebox.auth.store import SessionData

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])


class UserResponse(BaseModel):
    """User response model."""
    id: int
    username: str
    session_issued_at: datetime


@router.get("/me", response_model=UserResponse)
async def get_me(session: SessionData = Depends(require_session)):
    """Get the identity attached to the current session."""
    return UserResponse(
        id=session.subject_id,
        username=session.username,
        session_issued_at=session.issued_at,
    )
