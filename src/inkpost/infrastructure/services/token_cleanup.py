"""Purging of expired and stale tokens outside of a request.

Used by the ``cleanup-tokens`` command and by the optional background task
started with the application.
"""

import asyncio

from inkpost.core.config import Settings
from inkpost.core.logging import get_logger
from inkpost.infrastructure.persistence.database import DatabaseManager
from inkpost.infrastructure.persistence.repositories.token_store import PurgeResult, TokenStore

logger = get_logger(__name__)


async def purge_tokens(db: DatabaseManager, settings: Settings) -> PurgeResult:
    """Run one purge in its own session and commit it."""
    async with db.session() as session:
        result = await TokenStore(session).purge_expired(settings.used_token_retention)
        await session.commit()
    logger.info(
        "Token cleanup finished",
        refresh_tokens=result.refresh_tokens,
        password_reset_tokens=result.password_reset_tokens,
        email_verification_tokens=result.email_verification_tokens,
    )
    return result


async def run_periodic_cleanup(db: DatabaseManager, settings: Settings) -> None:
    """Purge tokens every ``token_cleanup_interval_minutes`` until cancelled.

    A failed run is logged and the loop carries on with the next interval.
    """
    interval = settings.token_cleanup_interval_minutes * 60
    logger.info("Periodic token cleanup started", interval_seconds=interval)
    while True:
        await asyncio.sleep(interval)
        try:
            await purge_tokens(db, settings)
        except Exception as e:
            logger.error("Periodic token cleanup failed", error=str(e), exc_info=True)
