"""UI page routes."""

import logging
import os
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from jukebox.auth.session import require_session, session_token
from jukebox.auth.store import SessionData
from jukebox.tracks import TrackNotFound, TrackStore, get_track_store

logger = logging.getLogger(__name__)
router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))


def page_url(path: str, token: Optional[str] = None, **params: Optional[str]) -> str:
    """Build a page URL, carrying the session token when there is one."""
    query = {key: value for key, value in params.items() if value}
    if token:
        query["token"] = token
    return f"{path}?{urlencode(query)}" if query else path


def _parse_id(track_id: str) -> int:
    """Path ids that are not integers name no track."""
    try:
        return int(track_id)
    except ValueError:
        raise TrackNotFound(track_id)


def _redirect(request: Request, path: str, **params: Optional[str]) -> RedirectResponse:
    return RedirectResponse(
        url=page_url(path, session_token(request), **params),
        status_code=status.HTTP_303_SEE_OTHER,
    )


def _render(request: Request, name: str, session: SessionData, **context):
    context.update({
        "user": session,
        "token": session_token(request),
    })
    return templates.TemplateResponse(request, name, context)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Root route - redirect to login."""
    return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    error: Optional[str] = None,
    message: Optional[str] = None,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Leaderboard page."""
    return _render(
        request, "dashboard.html", session,
        tracks=tracks.leaderboard(),
        error=error,
        message=message,
    )


@router.get("/add-music", response_class=HTMLResponse)
async def add_music_page(
    request: Request,
    error: Optional[str] = None,
    session: SessionData = Depends(require_session),
):
    """Form for adding a track."""
    return _render(
        request, "track_form.html", session,
        track=None,
        action="/add-music",
        error=error,
    )


@router.post("/add-music")
async def add_music(
    request: Request,
    title: str = Form(""),
    artist: str = Form(""),
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Add a track to the list."""
    try:
        track = tracks.add(title, artist)
    except ValueError:
        return _redirect(request, "/add-music", error="Title and artist are required")

    logger.info(f"{session.username} added track {track.id}")
    return _redirect(request, "/dashboard", message=f"Added {track.title}")


@router.get("/edit-music/{track_id}", response_class=HTMLResponse)
async def edit_music_page(
    request: Request,
    track_id: str,
    error: Optional[str] = None,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Form for editing a track."""
    try:
        track = tracks.get(_parse_id(track_id))
    except TrackNotFound:
        return _redirect(request, "/dashboard", error="Track not found")

    return _render(
        request, "track_form.html", session,
        track=track,
        action=f"/edit-music/{track.id}",
        error=error,
    )


@router.post("/edit-music/{track_id}")
async def edit_music(
    request: Request,
    track_id: str,
    title: str = Form(""),
    artist: str = Form(""),
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Update a track's title and artist."""
    try:
        track = tracks.update(_parse_id(track_id), title, artist)
    except TrackNotFound:
        return _redirect(request, "/dashboard", error="Track not found")
    except ValueError:
        return _redirect(request, f"/edit-music/{track_id}", error="Title and artist are required")

    logger.info(f"{session.username} edited track {track.id}")
    return _redirect(request, "/dashboard", message=f"Updated {track.title}")


@router.post("/delete-music/{track_id}")
async def delete_music(
    request: Request,
    track_id: str,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Remove a track."""
    try:
        track = tracks.delete(_parse_id(track_id))
    except TrackNotFound:
        return _redirect(request, "/dashboard", error="Track not found")

    logger.info(f"{session.username} deleted track {track_id}")
    return _redirect(request, "/dashboard", message=f"Deleted {track.title}")


@router.post("/vote/{track_id}")
async def vote(
    request: Request,
    track_id: str,
    session: SessionData = Depends(require_session),
    tracks: TrackStore = Depends(get_track_store),
):
    """Cast a vote for a track."""
    try:
        track = tracks.vote(_parse_id(track_id))
    except TrackNotFound:
        return _redirect(request, "/dashboard", error="Track not found")

    return _redirect(request, "/dashboard", message=f"Voted for {track.title}")
