"""Track API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from jukebox.auth.session import require_session
from jukebox.auth.store import SessionData
from jukebox.tracks import Track, TrackNotFound, TrackStore, get_track_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tracks", tags=["tracks"])


class TrackRequest(BaseModel):
    """Request to add or edit a track."""
    title: str = Field(min_length=1)
    artist: str = Field(min_length=1)


def _lookup(tracks: TrackStore, track_id: int) -> Track:
    try:
        return tracks.get(track_id)
    except TrackNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Track not found",
        )


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(exc),
    )


@router.get("", response_model=list[Track])
async def list_tracks(
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """List tracks in leaderboard order."""
    return tracks.leaderboard()


@router.post("", response_model=Track, status_code=status.HTTP_201_CREATED)
async def add_track(
    request: TrackRequest,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Add a track."""
    try:
        track = tracks.add(request.title, request.artist)
    except ValueError as e:
        raise _bad_request(e)

    logger.info(f"{session.username} added track {track.id} via API")
    return track


@router.put("/{track_id}", response_model=Track)
async def update_track(
    track_id: int,
    request: TrackRequest,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Edit a track."""
    _lookup(tracks, track_id)
    try:
        return tracks.update(track_id, request.title, request.artist)
    except ValueError as e:
        raise _bad_request(e)


@router.delete("/{track_id}")
async def delete_track(
    track_id: int,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Delete a track."""
    _lookup(tracks, track_id)
    tracks.delete(track_id)
    logger.info(f"{session.username} deleted track {track_id} via API")
    return {"status": "ok", "id": track_id}


@router.post("/{track_id}/vote", response_model=Track)
async def vote_track(
    track_id: int,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Vote for a track."""
    _lookup(tracks, track_id)
    return tracks.vote(track_id)
