"""
Server-side browser sessions keyed by an opaque cookie token.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from carwash.config import Settings
from carwash.models import WebSession

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the column type."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def load_web_session(db: AsyncSession, token: Optional[str], settings: Settings) -> WebSession:
    """Return the live session for token, or a new one."""
    now = utcnow()
    if token:
        result = await db.execute(select(WebSession).where(WebSession.token == token))
        web_session = result.scalar_one_or_none()
        if web_session and web_session.expires_at > now:
            web_session.last_seen_at = now
            return web_session
        if web_session:
            await db.delete(web_session)

    web_session = WebSession(
        token=secrets.token_urlsafe(32),
        backend_cookies=[],
        toasts=[],
        last_seen_at=now,
        expires_at=now + timedelta(minutes=settings.session_ttl_minutes),
    )
    db.add(web_session)
    await db.flush()
    return web_session


async def cleanup_expired_sessions(db: AsyncSession) -> int:
    """Delete expired sessions and return how many were removed."""
    result = await db.execute(delete(WebSession).where(WebSession.expires_at <= utcnow()))
    await db.commit()
    if result.rowcount:
        logger.info("Removed %d expired web sessions", result.rowcount)
    return result.rowcount or 0
