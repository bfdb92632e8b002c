import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models import Category
from storefront.services.auth import require_admin
from storefront.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("name", "slug", "description", "image", "sort_order")


def create_category(db: Session, session_token: Optional[str], data: Dict[str, Any]) -> Category:
    require_admin(db, session_token)
    category = Category(**{k: data.get(k) for k in CATEGORY_FIELDS})
    db.add(category)
    db.commit()
    logger.info(f"Created category {category.id} ({category.slug})")
    return category


def bulk_create_categories(
    db: Session, session_token: Optional[str], rows: List[Dict[str, Any]]
) -> List[int]:
    require_admin(db, session_token)
    categories = [Category(**{k: row.get(k) for k in CATEGORY_FIELDS}) for row in rows]
    db.add_all(categories)
    db.commit()
    return [c.id for c in categories]


def list_categories(db: Session, limit: int = 100, cursor: Optional[str] = None) -> Page:
    return paginate(db, select(Category), Category, limit, cursor)


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.get(Category, category_id)


def get_category_by_slug(db: Session, slug: str) -> Optional[Category]:
    return db.execute(
        select(Category).where(Category.slug == slug).order_by(Category.id.desc()).limit(1)
    ).scalar_one_or_none()


def update_category(
    db: Session, session_token: Optional[str], category_id: int, changes: Dict[str, Any]
) -> Category:
    require_admin(db, session_token)
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category")
    for key in CATEGORY_FIELDS:
        if key in changes:
            setattr(category, key, changes[key])
    db.commit()
    return category


def remove_category(db: Session, session_token: Optional[str], category_id: int) -> int:
    require_admin(db, session_token)
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category")
    # Products keep the dangling id in category_ids; storefront filters
    # simply stop matching it.
    db.delete(category)
    db.commit()
    return category_id
