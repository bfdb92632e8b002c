from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.models import Wishlist
from storefront.services.auth import require_user


def _find(db: Session, user_id: int) -> Optional[Wishlist]:
    return db.execute(select(Wishlist).where(Wishlist.user_id == user_id)).scalar_one_or_none()


def get_wishlist(db: Session, session_token: Optional[str]) -> Optional[Wishlist]:
    user = require_user(db, session_token)
    return _find(db, user.id)


def add_to_wishlist(db: Session, session_token: Optional[str], product_id: int) -> Wishlist:
    """Idempotent: adding a product already on the list changes nothing."""
    user = require_user(db, session_token)
    wishlist = _find(db, user.id)
    if wishlist is None:
        wishlist = Wishlist(user_id=user.id, product_ids=[product_id])
        db.add(wishlist)
        db.commit()
        return wishlist

    if product_id in wishlist.product_ids:
        return wishlist
    wishlist.product_ids = [*wishlist.product_ids, product_id]
    db.commit()
    return wishlist


def remove_from_wishlist(
    db: Session, session_token: Optional[str], product_id: int
) -> Optional[Wishlist]:
    user = require_user(db, session_token)
    wishlist = _find(db, user.id)
    if wishlist is None:
        return None
    wishlist.product_ids = [pid for pid in wishlist.product_ids if pid != product_id]
    db.commit()
    return wishlist


def set_wishlist(db: Session, session_token: Optional[str], product_ids: List[int]) -> Wishlist:
    user = require_user(db, session_token)
    wishlist = _find(db, user.id)
    if wishlist is None:
        wishlist = Wishlist(user_id=user.id, product_ids=list(product_ids))
        db.add(wishlist)
    else:
        wishlist.product_ids = list(product_ids)
    db.commit()
    return wishlist
