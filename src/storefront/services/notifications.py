import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from storefront.core.exceptions import ForbiddenError, NotFoundError
from storefront.models import Notification, User
from storefront.services.auth import require_admin, require_owner_or_admin, require_user
from storefront.services.pagination import Page, paginate

logger = logging.getLogger(__name__)


def notify(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    body: Optional[str] = None,
    link: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    """Queue a notification on the caller's unit of work. Does not commit."""
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        body=body,
        link=link,
        metadata_=metadata,
        read=False,
    )
    db.add(notification)
    return notification


def list_notifications(
    db: Session,
    session_token: Optional[str],
    read: Optional[bool] = None,
    limit: int = 50,
    cursor: Optional[str] = None,
) -> Page:
    user = require_user(db, session_token)
    stmt = select(Notification).where(Notification.user_id == user.id)
    if read is not None:
        stmt = stmt.where(Notification.read == read)
    return paginate(db, stmt, Notification, limit, cursor)


def unread_count(db: Session, session_token: Optional[str]) -> int:
    user = require_user(db, session_token)
    return db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user.id, Notification.read.is_(False)
        )
    ).scalar_one()


def get_notification(
    db: Session, session_token: Optional[str], notification_id: int
) -> Optional[Notification]:
    """Someone else's notification reads as missing."""
    user = require_user(db, session_token)
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user.id:
        return None
    return notification


def mark_read(db: Session, session_token: Optional[str], notification_id: int) -> Notification:
    user = require_user(db, session_token)
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification")
    if notification.user_id != user.id:
        raise ForbiddenError("Forbidden")
    notification.read = True
    db.commit()
    return notification


def mark_all_read(db: Session, session_token: Optional[str]) -> int:
    user = require_user(db, session_token)
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.read.is_(False))
        .values(read=True)
    )
    db.commit()
    return result.rowcount


def _recipient_or_404(db: Session, user_id: int) -> None:
    if db.get(User, user_id) is None:
        raise NotFoundError("User", str(user_id))


def create_notification(
    db: Session, session_token: Optional[str], data: Dict[str, Any]
) -> Notification:
    require_admin(db, session_token)
    _recipient_or_404(db, data["user_id"])
    notification = notify(
        db,
        data["user_id"],
        data["type"],
        data["title"],
        body=data.get("body"),
        link=data.get("link"),
        metadata=data.get("metadata"),
    )
    db.commit()
    return notification


def bulk_create_notifications(
    db: Session, session_token: Optional[str], rows: List[Dict[str, Any]]
) -> List[int]:
    admin = require_admin(db, session_token)
    for row in rows:
        _recipient_or_404(db, row["user_id"])
    created = [
        notify(
            db,
            row["user_id"],
            row["type"],
            row["title"],
            body=row.get("body"),
            link=row.get("link"),
            metadata=row.get("metadata"),
        )
        for row in rows
    ]
    db.commit()
    logger.info(f"Admin {admin.id} sent {len(created)} notifications")
    return [n.id for n in created]


def remove_notification(db: Session, session_token: Optional[str], notification_id: int) -> int:
    user = require_user(db, session_token)
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification")
    require_owner_or_admin(user, notification.user_id)
    db.delete(notification)
    db.commit()
    return notification_id


def remove_all_notifications(db: Session, session_token: Optional[str]) -> int:
    user = require_user(db, session_token)
    result = db.execute(delete(Notification).where(Notification.user_id == user.id))
    db.commit()
    return result.rowcount
