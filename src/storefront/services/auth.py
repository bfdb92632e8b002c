"""
Session-token resolution shared by every handler.

A token is looked up by equality in the sessions table. Missing, blank,
unknown and expired tokens all resolve to "no user"; the require_* helpers
turn that into UnauthorizedError.
"""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.core.exceptions import ForbiddenError, UnauthorizedError
from storefront.db import utcnow
from storefront.models import User, UserSession
from storefront.utils.date_utils import DateUtils

logger = logging.getLogger(__name__)


def get_current_user(db: Session, session_token: Optional[str]) -> Optional[User]:
    if not session_token or not session_token.strip():
        return None
    session = db.execute(
        select(UserSession).where(UserSession.token == session_token)
    ).scalar_one_or_none()
    if session is None or DateUtils.is_expired(session.expires_at):
        return None
    return db.get(User, session.user_id)


def require_user(db: Session, session_token: Optional[str]) -> User:
    user = get_current_user(db, session_token)
    if user is None:
        raise UnauthorizedError("Unauthorized")
    return user


def require_admin(db: Session, session_token: Optional[str]) -> User:
    user = require_user(db, session_token)
    if not user.is_admin:
        logger.warning(f"Admin-only operation refused for user {user.id}")
        raise ForbiddenError("Forbidden: admin required")
    return user


def require_owner_or_admin(user: User, owner_id: Optional[int]) -> None:
    if user.id != owner_id and not user.is_admin:
        raise ForbiddenError("Forbidden")


def prune_expired_sessions(db: Session) -> int:
    """Delete every session past its expiry. Returns how many were removed."""
    result = db.execute(delete(UserSession).where(UserSession.expires_at < utcnow()))
    db.commit()
    logger.info(f"Pruned {result.rowcount} expired sessions")
    return result.rowcount
