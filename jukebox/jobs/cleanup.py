"""Session retention cleanup job."""

import logging

from jukebox.auth.session import SessionManager

logger = logging.getLogger(__name__)


async def sweep_expired_sessions(manager: SessionManager) -> dict:
    """
    Remove sessions older than the session TTL.

    Verification already drops an expired session when its handle comes back,
    so this only catches sessions whose clients never return. For the signed
    strategy the table holds revoked token ids, which are pruned once the
    tokens they revoke would have expired anyway.
    """
    removed = manager.sweep()
    summary = {
        "strategy": manager.strategy,
        "expired": removed,
        **manager.stats(),
    }

    logger.info(f"Session cleanup completed: {summary}")
    return summary
