"""
Order handlers.

Two ways in:

- create_order stores whatever items and totals the client sends. The
  amounts are trusted as-is.
- checkout builds the order from the caller's cart, prices it with the
  current store settings, records a pending payment for the total and
  empties the cart, all in one commit.

Status changes are admin-only and unrestricted: any status can follow any
other.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from storefront.models import Order, Payment
from storefront.services.auth import require_admin, require_owner_or_admin, require_user
from storefront.services.carts import find_cart
from storefront.services.identifiers import ORDER_NUMBER_DIGITS, generate_unique_code
from storefront.services.pagination import Page, paginate
from storefront.services.pricing import compute_order_totals, subtotal_of
from storefront.services.products import get_products_by_ids
from storefront.services.settings import effective_settings
from storefront.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)

DELIVERY_REQUIRED_FIELDS = ("line1", "city", "postal_code", "country")
ORDER_UPDATE_FIELDS = ("status", "payment_id", "shipping_address")


def _clean_address(address: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Strip whitespace and drop blank optional parts."""
    if not address:
        return None
    cleaned = {}
    for key, value in address.items():
        if isinstance(value, str):
            value = value.strip()
        if value not in (None, ""):
            cleaned[key] = value
    return cleaned


def _has_full_address(address: Optional[Dict[str, Any]]) -> bool:
    return bool(address) and all(address.get(k) for k in DELIVERY_REQUIRED_FIELDS)


def _new_order(db: Session, user_id: int, **fields) -> Order:
    order = Order(
        user_id=user_id,
        order_number=generate_unique_code(db, Order.order_number, ORDER_NUMBER_DIGITS),
        status="pending",
        **fields,
    )
    db.add(order)
    return order


def create_order(db: Session, session_token: Optional[str], data: Dict[str, Any]) -> Order:
    user = require_user(db, session_token)
    order = _new_order(
        db,
        user.id,
        items=[dict(i) for i in data["items"]],
        subtotal=data["subtotal"],
        shipping=data.get("shipping"),
        tax=data.get("tax"),
        total=data["total"],
        order_type=data.get("order_type") or "delivery",
        shipping_address=_clean_address(data.get("shipping_address")),
    )
    db.commit()
    logger.info(f"Order {order.id} (#{order.order_number}) created by user {user.id}")
    return order


def _priced_cart(db: Session, user_id: int):
    """Cart lines joined to live products, plus their totals."""
    cart = find_cart(db, user_id)
    if cart is None or not cart.items:
        raise BusinessLogicError("Cart is empty", rule="non_empty_cart")

    products = {p.id: p for p in get_products_by_ids(db, [i["product_id"] for i in cart.items])}
    if len(products) != len({i["product_id"] for i in cart.items}):
        raise BusinessLogicError(
            "Some items are no longer available. Please update your cart.",
            rule="products_exist",
        )

    items = [
        {
            "product_id": line["product_id"],
            "quantity": line["quantity"],
            "price_snapshot": line["price_snapshot"],
            "name": products[line["product_id"]].name,
        }
        for line in cart.items
    ]
    store = effective_settings(db)
    totals = compute_order_totals(
        subtotal_of(items),
        store.free_shipping_threshold_pesewas,
        store.shipping_flat_rate_pesewas,
        store.tax_rate_percent,
    )
    return cart, items, totals, store


def quote_checkout(db: Session, session_token: Optional[str]) -> Dict[str, Any]:
    """What checkout would charge for the current cart, without writing."""
    user = require_user(db, session_token)
    cart, items, totals, store = _priced_cart(db, user.id)
    return {**totals.to_dict(), "currency": store.currency, "item_count": len(items)}


def checkout(
    db: Session,
    session_token: Optional[str],
    order_type: str = "delivery",
    shipping_address: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    user = require_user(db, session_token)
    address = _clean_address(shipping_address)

    if order_type == "delivery":
        if not _has_full_address(address):
            raise ValidationError(
                "Please fill in required address fields for delivery "
                "(address, city, postal code, country)."
            )
        if not address.get("phone"):
            raise ValidationError("Please enter your phone number for delivery.")
    elif not _has_full_address(address):
        # Pickup keeps an address only when a complete one was given.
        address = None

    cart, items, totals, store = _priced_cart(db, user.id)

    order = _new_order(
        db,
        user.id,
        items=items,
        subtotal=totals.subtotal,
        shipping=totals.shipping,
        tax=totals.tax,
        total=totals.total,
        order_type=order_type,
        shipping_address=address,
    )
    db.flush()

    payment = Payment(
        order_id=order.id,
        amount=totals.total,
        currency=store.currency,
        status="pending",
    )
    db.add(payment)
    db.flush()
    order.payment_id = payment.id
    cart.items = []
    db.commit()

    logger.info(
        f"Checkout: order {order.id} (#{order.order_number}) total={totals.total} "
        f"for user {user.id}"
    )
    return {
        "order": order,
        "payment": payment,
        "whatsapp_link": payment_link_for(order, store.admin_whatsapp, store.currency),
    }


def list_orders(
    db: Session,
    session_token: Optional[str],
    status: Optional[str] = None,
    limit: int = 50,
    cursor: Optional[str] = None,
) -> Page:
    """Admins see every order; customers only their own."""
    user = require_user(db, session_token)
    stmt = select(Order)
    if not user.is_admin:
        stmt = stmt.where(Order.user_id == user.id)
    if status is not None:
        stmt = stmt.where(Order.status == status)
    return paginate(db, stmt, Order, limit, cursor)


def get_order(db: Session, session_token: Optional[str], order_id: int) -> Optional[Order]:
    user = require_user(db, session_token)
    order = db.get(Order, order_id)
    if order is None:
        return None
    require_owner_or_admin(user, order.user_id)
    return order


def update_order(
    db: Session, session_token: Optional[str], order_id: int, changes: Dict[str, Any]
) -> Order:
    admin = require_admin(db, session_token)
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order")
    payment_id = changes.get("payment_id")
    if payment_id is not None:
        payment = db.get(Payment, payment_id)
        if payment is None or payment.order_id != order.id:
            raise NotFoundError("Payment", str(payment_id))
    for key in ORDER_UPDATE_FIELDS:
        if changes.get(key) is not None:
            value = changes[key]
            if key == "shipping_address":
                value = _clean_address(value)
            setattr(order, key, value)
    db.commit()
    logger.info(f"Order {order_id} updated by admin {admin.id}: {sorted(changes)}")
    return order


def remove_order(db: Session, session_token: Optional[str], order_id: int) -> int:
    require_admin(db, session_token)
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order")
    db.delete(order)
    db.commit()
    return order_id


def bulk_update_order_status(
    db: Session, session_token: Optional[str], order_ids: List[int], status: str
) -> int:
    require_admin(db, session_token)
    for order_id in order_ids:
        order = db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order", str(order_id))
        order.status = status
    db.commit()
    logger.info(f"Set status={status} on {len(order_ids)} orders")
    return len(order_ids)


def payment_link_for(order: Order, admin_whatsapp: str, currency: str) -> str:
    text = FormattingUtils.whatsapp_payment_message(
        order.reference,
        FormattingUtils.format_money(order.total, currency),
        order.order_type,
        order.shipping_address,
    )
    return FormattingUtils.whatsapp_link(admin_whatsapp, text)


def whatsapp_payment_link(db: Session, session_token: Optional[str], order_id: int) -> str:
    """wa.me deep link pre-filled with the 'I've paid' message for an order."""
    user = require_user(db, session_token)
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order")
    require_owner_or_admin(user, order.user_id)
    store = effective_settings(db)
    return payment_link_for(order, store.admin_whatsapp, store.currency)
