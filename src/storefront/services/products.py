"""
Catalog handlers.

Reads are public. Listings are role-gated: anyone who is not an admin only
ever sees store-visible products, whatever status filter they ask for.
Writes are admin-only. Archiving is a status change, not a delete.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models import Product
from storefront.models.product import STORE_VISIBLE_STATUSES
from storefront.services.auth import get_current_user, require_admin
from storefront.services.identifiers import PRODUCT_SKU_DIGITS, generate_unique_code
from storefront.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name",
    "slug",
    "description",
    "price",
    "compare_at_price",
    "images",
    "status",
    "stock",
    "sku",
    "category_ids",
)


def _build_product(db: Session, data: Dict[str, Any]) -> Product:
    values = {k: data[k] for k in PRODUCT_FIELDS if data.get(k) is not None}
    if not values.get("sku"):
        values["sku"] = generate_unique_code(db, Product.sku, PRODUCT_SKU_DIGITS)
    values.setdefault("images", [])
    values.setdefault("category_ids", [])
    return Product(**values)


def _apply_changes(product: Product, changes: Dict[str, Any]) -> None:
    for key in PRODUCT_FIELDS:
        if key in changes and changes[key] is not None:
            setattr(product, key, changes[key])


def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", str(product_id))
    return product


def create_product(db: Session, session_token: Optional[str], data: Dict[str, Any]) -> Product:
    require_admin(db, session_token)
    product = _build_product(db, data)
    db.add(product)
    db.commit()
    logger.info(f"Created product {product.id} sku={product.sku}")
    return product


def bulk_create_products(
    db: Session, session_token: Optional[str], rows: List[Dict[str, Any]]
) -> List[int]:
    require_admin(db, session_token)
    products = []
    for row in rows:
        product = _build_product(db, row)
        db.add(product)
        # Flush so the next row's SKU probe sees this one.
        db.flush()
        products.append(product)
    db.commit()
    logger.info(f"Bulk-created {len(products)} products")
    return [p.id for p in products]


def list_products(
    db: Session,
    session_token: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = 50,
    cursor: Optional[str] = None,
) -> Page:
    user = get_current_user(db, session_token)
    stmt = select(Product)
    if user is None or not user.is_admin:
        stmt = stmt.where(Product.status.in_(STORE_VISIBLE_STATUSES))
    if status is not None:
        stmt = stmt.where(Product.status == status)
    return paginate(db, stmt, Product, limit, cursor)


def list_for_store(
    db: Session,
    category_id: Optional[str] = None,
    limit: int = 48,
) -> List[Product]:
    """Active products, newest first, optionally limited to one category."""
    stmt = select(Product).where(Product.status == "active").order_by(Product.id.desc())
    if category_id is None:
        return list(db.execute(stmt.limit(limit)).scalars())

    # category_ids is a JSON list; filter in Python so any backend works.
    matches = []
    for product in db.execute(stmt).scalars():
        if product.in_category(category_id):
            matches.append(product)
            if len(matches) == limit:
                break
    return matches


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.get(Product, product_id)


def get_product_by_slug(db: Session, slug: str) -> Optional[Product]:
    # Slugs are not unique; the newest product wins.
    return db.execute(
        select(Product).where(Product.slug == slug).order_by(Product.id.desc()).limit(1)
    ).scalar_one_or_none()


def get_products_by_ids(db: Session, product_ids: List[int]) -> List[Product]:
    """Fetch several products, in the requested order, skipping missing ids."""
    if not product_ids:
        return []
    found = {
        p.id: p
        for p in db.execute(select(Product).where(Product.id.in_(product_ids))).scalars()
    }
    return [found[pid] for pid in product_ids if pid in found]


def update_product(
    db: Session, session_token: Optional[str], product_id: int, changes: Dict[str, Any]
) -> Product:
    require_admin(db, session_token)
    product = _get_or_404(db, product_id)
    _apply_changes(product, changes)
    db.commit()
    return product


def bulk_update_products(
    db: Session, session_token: Optional[str], updates: List[Dict[str, Any]]
) -> int:
    require_admin(db, session_token)
    for update in updates:
        product = _get_or_404(db, update["product_id"])
        _apply_changes(product, update)
    db.commit()
    return len(updates)


def bulk_update_product_status(
    db: Session, session_token: Optional[str], product_ids: List[int], status: str
) -> int:
    require_admin(db, session_token)
    for product_id in product_ids:
        _get_or_404(db, product_id).status = status
    db.commit()
    logger.info(f"Set status={status} on {len(product_ids)} products")
    return len(product_ids)


def remove_product(db: Session, session_token: Optional[str], product_id: int) -> int:
    require_admin(db, session_token)
    db.delete(_get_or_404(db, product_id))
    db.commit()
    return product_id


def bulk_delete_products(db: Session, session_token: Optional[str], product_ids: List[int]) -> int:
    require_admin(db, session_token)
    for product_id in product_ids:
        db.delete(_get_or_404(db, product_id))
    db.commit()
    return len(product_ids)
