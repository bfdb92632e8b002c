"""
Cart handlers. Every operation acts on the caller's own cart, created lazily
on the first write.

Cart lines are plain dicts inside a JSON column, so each handler builds a new
list and assigns it back rather than mutating the stored one.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.models import Cart
from storefront.services.auth import require_user


def _line(product_id: int, quantity: int, price_snapshot: int) -> Dict[str, int]:
    return {
        "product_id": int(product_id),
        "quantity": int(quantity),
        "price_snapshot": int(price_snapshot),
    }


def find_cart(db: Session, user_id: int) -> Optional[Cart]:
    return db.execute(select(Cart).where(Cart.user_id == user_id)).scalar_one_or_none()


def get_cart(db: Session, session_token: Optional[str]) -> Optional[Cart]:
    user = require_user(db, session_token)
    return find_cart(db, user.id)


def set_cart_items(db: Session, session_token: Optional[str], items: List[Dict[str, Any]]) -> Cart:
    user = require_user(db, session_token)
    lines = [_line(i["product_id"], i["quantity"], i["price_snapshot"]) for i in items]
    cart = find_cart(db, user.id)
    if cart is None:
        cart = Cart(user_id=user.id, items=lines)
        db.add(cart)
    else:
        cart.items = lines
    db.commit()
    return cart


def add_cart_item(
    db: Session,
    session_token: Optional[str],
    product_id: int,
    quantity: int,
    price_snapshot: int,
) -> Cart:
    """Add a line, or bump the quantity of an existing one and refresh its price."""
    user = require_user(db, session_token)
    cart = find_cart(db, user.id)
    if cart is None:
        cart = Cart(user_id=user.id, items=[_line(product_id, quantity, price_snapshot)])
        db.add(cart)
        db.commit()
        return cart

    items = [dict(i) for i in cart.items]
    for item in items:
        if item["product_id"] == product_id:
            item["quantity"] += quantity
            item["price_snapshot"] = price_snapshot
            break
    else:
        items.append(_line(product_id, quantity, price_snapshot))
    cart.items = items
    db.commit()
    return cart


def update_cart_item_quantity(
    db: Session,
    session_token: Optional[str],
    product_id: int,
    quantity: int,
    price_snapshot: int,
) -> Optional[Cart]:
    """
    Set a line's quantity outright; zero or less removes the line.
    Returns None when the user has no cart yet.
    """
    user = require_user(db, session_token)
    cart = find_cart(db, user.id)
    if cart is None:
        return None

    if quantity <= 0:
        cart.items = [dict(i) for i in cart.items if i["product_id"] != product_id]
    else:
        replacement = _line(product_id, quantity, price_snapshot)
        items = [dict(i) for i in cart.items]
        for index, item in enumerate(items):
            if item["product_id"] == product_id:
                items[index] = replacement
                break
        else:
            items.append(replacement)
        cart.items = items
    db.commit()
    return cart


def remove_cart_item(db: Session, session_token: Optional[str], product_id: int) -> Optional[Cart]:
    user = require_user(db, session_token)
    cart = find_cart(db, user.id)
    if cart is None:
        return None
    cart.items = [dict(i) for i in cart.items if i["product_id"] != product_id]
    db.commit()
    return cart


def clear_cart(db: Session, session_token: Optional[str]) -> Optional[Cart]:
    user = require_user(db, session_token)
    cart = find_cart(db, user.id)
    if cart is None:
        return None
    cart.items = []
    db.commit()
    return cart
