"""UI module."""

from jukebox.ui.routes import router as ui_router

__all__ = ["ui_router"]
