"""
Review handlers.

New reviews start out pending. Anyone can read approved reviews; pending and
rejected ones are visible to admins only. Authors may edit their own review
text and rating, but only an admin moves a review between statuses.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from storefront.models import Order, Product, Review
from storefront.services.auth import (
    get_current_user,
    require_admin,
    require_owner_or_admin,
    require_user,
)
from storefront.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def _check_rating(rating: Any) -> None:
    if not isinstance(rating, int) or isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("Rating must be 1-5")


def create_review(db: Session, session_token: Optional[str], data: Dict[str, Any]) -> Review:
    user = require_user(db, session_token)
    _check_rating(data.get("rating"))
    if db.get(Product, data["product_id"]) is None:
        raise NotFoundError("Product", str(data["product_id"]))
    if data.get("order_id") is not None and db.get(Order, data["order_id"]) is None:
        raise NotFoundError("Order", str(data["order_id"]))
    review = Review(
        user_id=user.id,
        product_id=data["product_id"],
        order_id=data.get("order_id"),
        rating=data["rating"],
        title=data.get("title"),
        body=data["body"],
        status="pending",
    )
    db.add(review)
    db.commit()
    logger.info(f"Review {review.id} submitted for product {review.product_id}")
    return review


def list_reviews_by_product(
    db: Session,
    product_id: int,
    session_token: Optional[str] = None,
    status: str = "approved",
    limit: int = 50,
    cursor: Optional[str] = None,
) -> Page:
    if status != "approved":
        user = get_current_user(db, session_token)
        if user is None or not user.is_admin:
            raise ForbiddenError("Forbidden: admin required")
    stmt = select(Review).where(Review.product_id == product_id, Review.status == status)
    return paginate(db, stmt, Review, limit, cursor)


def list_reviews_by_user(
    db: Session,
    session_token: Optional[str],
    limit: int = 50,
    cursor: Optional[str] = None,
) -> Page:
    user = require_user(db, session_token)
    return paginate(db, select(Review).where(Review.user_id == user.id), Review, limit, cursor)


def get_review(db: Session, review_id: int) -> Optional[Review]:
    return db.get(Review, review_id)


def update_review(
    db: Session, session_token: Optional[str], review_id: int, changes: Dict[str, Any]
) -> Review:
    user = require_user(db, session_token)
    review = db.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review")
    require_owner_or_admin(user, review.user_id)
    if changes.get("status") is not None and not user.is_admin:
        raise ForbiddenError("Forbidden: admin required")
    if changes.get("rating") is not None:
        _check_rating(changes["rating"])

    for key in ("rating", "title", "body", "status"):
        if changes.get(key) is not None:
            setattr(review, key, changes[key])
    db.commit()
    return review


def remove_review(db: Session, session_token: Optional[str], review_id: int) -> int:
    user = require_user(db, session_token)
    review = db.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review")
    require_owner_or_admin(user, review.user_id)
    db.delete(review)
    db.commit()
    return review_id


def bulk_update_review_status(
    db: Session, session_token: Optional[str], review_ids: List[int], status: str
) -> int:
    admin = require_admin(db, session_token)
    for review_id in review_ids:
        review = db.get(Review, review_id)
        if review is None:
            raise NotFoundError("Review", str(review_id))
        review.status = status
    db.commit()
    logger.info(f"Admin {admin.id} set status={status} on {len(review_ids)} reviews")
    return len(review_ids)
