"""
Account handlers: registration, login/logout and user administration.

Every handler returns ORM rows; the route layer shapes them through
UserOut, which never exposes password_hash.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from storefront.core.security import (
    hash_password,
    new_session_token,
    session_expiry,
    verify_password,
)
from storefront.models import User, UserSession
from storefront.services.auth import get_current_user, require_admin, require_user
from storefront.services.pagination import Page, paginate
from storefront.utils.validators import ValidationUtils

logger = logging.getLogger(__name__)


def _find_by_email(db: Session, email: str) -> Optional[User]:
    normalized = ValidationUtils.normalize_email(email)
    return db.execute(select(User).where(User.email == normalized)).scalar_one_or_none()


def _open_session(
    db: Session,
    user: User,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None,
) -> str:
    token = new_session_token()
    db.add(
        UserSession(
            user_id=user.id,
            token=token,
            expires_at=session_expiry(),
            user_agent=user_agent,
            ip=ip,
        )
    )
    return token


def _revoke_sessions(db: Session, user_ids: List[int]) -> None:
    db.execute(delete(UserSession).where(UserSession.user_id.in_(user_ids)))


def register(
    db: Session,
    email: str,
    password: str,
    name: str,
    image: Optional[str] = None,
    phone: Optional[str] = None,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a customer account and log it in. Returns session token + user."""
    if _find_by_email(db, email) is not None:
        raise ConflictError("Email already registered", conflict_field="email")

    user = User(
        email=ValidationUtils.normalize_email(email),
        name=name,
        role="customer",
        password_hash=hash_password(password),
        image=image,
        phone=phone,
    )
    db.add(user)
    db.flush()
    token = _open_session(db, user, user_agent, ip)
    db.commit()
    logger.info(f"Registered customer {user.id}")
    return {"session_token": token, "user": user}


def login(
    db: Session,
    email: str,
    password: str,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None,
) -> Dict[str, Any]:
    user = _find_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise UnauthorizedError("Invalid email or password")
    token = _open_session(db, user, user_agent, ip)
    db.commit()
    return {"session_token": token, "user": user}


def logout(db: Session, session_token: str) -> None:
    session = db.execute(
        select(UserSession).where(UserSession.token == session_token)
    ).scalar_one_or_none()
    if session is not None:
        db.delete(session)
        db.commit()


def get_me(db: Session, session_token: Optional[str]) -> Optional[User]:
    return get_current_user(db, session_token)


def list_users(
    db: Session,
    session_token: Optional[str],
    limit: int = 50,
    cursor: Optional[str] = None,
) -> Page:
    require_admin(db, session_token)
    return paginate(db, select(User), User, limit, cursor)


def get_user(db: Session, session_token: Optional[str], user_id: int) -> Optional[User]:
    me = require_user(db, session_token)
    if not me.is_admin and me.id != user_id:
        raise ForbiddenError("Forbidden")
    return db.get(User, user_id)


def update_user(
    db: Session,
    session_token: Optional[str],
    user_id: int,
    changes: Dict[str, Any],
) -> User:
    """
    Patch profile fields. Self or admin; only an admin may change a role.
    Keys absent from changes are left alone.
    """
    me = require_user(db, session_token)
    if me.id != user_id and not me.is_admin:
        raise ForbiddenError("Forbidden")
    if "role" in changes and not me.is_admin:
        raise ForbiddenError("Forbidden")

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    for key in ("name", "image", "phone", "role"):
        if key in changes:
            setattr(user, key, changes[key])
    db.commit()
    return user


def change_password(
    db: Session,
    session_token: Optional[str],
    current_password: str,
    new_password: str,
) -> None:
    user = require_user(db, session_token)
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is wrong")
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"Password changed for user {user.id}")


def remove_user(db: Session, session_token: Optional[str], user_id: int) -> int:
    me = require_user(db, session_token)
    if me.id != user_id and not me.is_admin:
        raise ForbiddenError("Forbidden")
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    _revoke_sessions(db, [user_id])
    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted by {me.id}")
    return user_id


def bulk_delete_users(db: Session, session_token: Optional[str], user_ids: List[int]) -> int:
    admin = require_admin(db, session_token)
    for user_id in user_ids:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))
        db.delete(user)
    _revoke_sessions(db, user_ids)
    db.commit()
    logger.info(f"Admin {admin.id} bulk-deleted {len(user_ids)} users")
    return len(user_ids)
