"""API endpoints module."""

from fastapi import APIRouter

from jukebox.api.users import router as users_router
from jukebox.api.tracks import router as tracks_router

api_router = APIRouter(prefix="/api")

api_router.include_router(users_router)
api_router.include_router(tracks_router)

__all__ = ["api_router"]
