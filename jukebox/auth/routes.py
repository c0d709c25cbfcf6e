"""Authentication routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from jukebox.auth.errors import InvalidCredentials
from jukebox.auth.identity import IdentityStore, get_identity_store
from jukebox.auth.session import (
    SESSION_COOKIE_NAME,
    SessionManager,
    extract_handle,
    get_current_session_optional,
    get_session_manager,
)
from jukebox.config import get_settings
from jukebox.ui.routes import page_url, templates

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, error: Optional[str] = None):
    """Login page."""
    session = await get_current_session_optional(request)
    if session:
        return RedirectResponse(
            url=page_url("/dashboard", request.query_params.get("token")),
            status_code=status.HTTP_302_FOUND,
        )

    return templates.TemplateResponse(request, "login.html", {
        "error": error,
        "token": None,
    })


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    identities: IdentityStore = Depends(get_identity_store),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Check submitted credentials and start a session."""
    try:
        account = identities.verify_credentials(username, password)
        handle = sessions.create(account)
    except InvalidCredentials as e:
        logger.warning(f"Failed login for {username!r}")
        return RedirectResponse(
            url=page_url("/login", error=e.reason),
            status_code=status.HTTP_302_FOUND,
        )
    except Exception as e:
        logger.exception(f"Login error: {e}")
        return RedirectResponse(
            url=page_url("/login", error="Server error"),
            status_code=status.HTTP_302_FOUND,
        )

    logger.info(f"User {account.username} logged in")

    if not sessions.uses_cookie:
        return RedirectResponse(
            url=page_url("/dashboard", handle),
            status_code=status.HTTP_302_FOUND,
        )

    settings = get_settings()
    response = RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=handle,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=int(sessions.ttl.total_seconds()),
    )
    return response


@router.post("/logout")
async def logout(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
):
    """Log out the current user."""
    handle = await extract_handle(request)
    if handle:
        sessions.destroy(handle)
        logger.info("Session destroyed on logout")

    response = RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)
    if sessions.uses_cookie:
        response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/logout")
async def logout_get(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
):
    """Log out the current user (GET for convenience)."""
    return await logout(request, sessions)
