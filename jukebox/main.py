"""Main FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager
from urllib.parse import urlencode

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from jukebox.auth.errors import AuthError
from jukebox.auth.identity import IdentityStore
from jukebox.auth.session import SESSION_COOKIE_NAME, build_session_manager
from jukebox.config import get_settings
from jukebox.tracks import TrackStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def init_state(app: FastAPI) -> None:
    """Create the process-wide stores. They live until the process exits."""
    settings = get_settings()
    app.state.identities = IdentityStore.seeded()
    app.state.tracks = TrackStore.seeded()
    app.state.sessions = build_session_manager(settings, app.state.identities)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting Jukebox...")
    logger.info(f"Public URL: {settings.public_url}")
    logger.info(f"Session strategy: {settings.session_strategy}")

    init_state(app)
    logger.info(
        f"Seeded {len(app.state.identities)} accounts and {len(app.state.tracks)} tracks"
    )

    # Start background scheduler
    try:
        from jukebox.jobs.scheduler import setup_scheduler
        setup_scheduler(app.state.sessions)
    except Exception as e:
        logger.error(f"Failed to start scheduler: {e}")

    yield

    # Shutdown
    logger.info("Shutting down...")

    try:
        from jukebox.jobs.scheduler import shutdown_scheduler
        shutdown_scheduler()
    except Exception as e:
        logger.error(f"Error stopping scheduler: {e}")

    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Jukebox",
    description="A session-gated music voting site",
    version="1.0.0",
    lifespan=lifespan,
)


# Health check endpoint
@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    sessions = request.app.state.sessions
    return {
        "status": "healthy",
        "strategy": sessions.strategy,
        **sessions.stats(),
    }


# Include routers
from jukebox.auth.routes import router as auth_router
from jukebox.api import api_router
from jukebox.ui.routes import router as ui_router

app.include_router(auth_router)
app.include_router(api_router)
app.include_router(ui_router)


@app.exception_handler(AuthError)
async def auth_exception_handler(request: Request, exc: AuthError):
    """Send unauthenticated requests back to the login page."""
    logger.info(f"Access denied to {request.url.path}: {exc.reason}")

    if request.url.path.startswith("/api/"):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": exc.reason},
            headers={"WWW-Authenticate": "Bearer"},
        )

    response = RedirectResponse(
        url=f"/login?{urlencode({'error': exc.reason})}",
        status_code=status.HTTP_302_FOUND,
    )
    if request.cookies.get(SESSION_COOKIE_NAME):
        response.delete_cookie(SESSION_COOKIE_NAME)
    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    # For API requests, return JSON
    if request.url.path.startswith("/api/"):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    return HTMLResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=(
            "<!doctype html><title>Something went wrong</title>"
            "<h1>Something went wrong</h1>"
            "<p>An unexpected error occurred. <a href=\"/login\">Back to login</a></p>"
        ),
    )


# Redirect /favicon.ico to prevent 404 errors
@app.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon."""
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    log_level = settings.log_level.lower()

    uvicorn.run(
        "jukebox.main:app",
        host="0.0.0.0",
        port=3000,
        log_level=log_level,
        reload=False,
    )
