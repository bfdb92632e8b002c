"""
Payment handlers.

Payments are manual: the customer pays by mobile money and sends proof on
WhatsApp, then an admin moves the payment to 'confirmed'. Access follows the
owning order, so a customer can see and touch payments for their own orders
only.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models import Order, Payment
from storefront.services.auth import require_admin, require_owner_or_admin, require_user
from storefront.services.notifications import notify
from storefront.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

PAYMENT_UPDATE_FIELDS = ("status", "whatsapp_thread_id", "whatsapp_message_id", "notes")


def _order_or_404(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order")
    return order


def _relink_latest_payment(db: Session, order_id: int) -> None:
    """Point the order at its newest remaining payment, or at nothing."""
    order = db.get(Order, order_id)
    if order is None:
        return
    order.payment_id = db.execute(
        select(Payment.id)
        .where(Payment.order_id == order_id)
        .order_by(Payment.id.desc())
        .limit(1)
    ).scalar_one_or_none()


def _notify_confirmed(db: Session, order: Order) -> None:
    if order.user_id is None:
        return
    notify(
        db,
        order.user_id,
        "payment",
        "Payment received",
        body=f"Your payment for Order #{order.reference} has been confirmed.",
        link=f"/orders/{order.id}",
        metadata={"order_id": order.id},
    )


def create_payment(db: Session, session_token: Optional[str], data: Dict[str, Any]) -> Payment:
    user = require_user(db, session_token)
    order = _order_or_404(db, data["order_id"])
    require_owner_or_admin(user, order.user_id)

    payment = Payment(
        order_id=order.id,
        amount=data["amount"],
        currency=data["currency"],
        status=data.get("status") or "pending",
        whatsapp_thread_id=data.get("whatsapp_thread_id"),
        whatsapp_message_id=data.get("whatsapp_message_id"),
        notes=data.get("notes"),
    )
    db.add(payment)
    db.flush()
    order.payment_id = payment.id
    db.commit()
    logger.info(f"Payment {payment.id} recorded for order {order.id}")
    return payment


def list_payments(
    db: Session,
    session_token: Optional[str],
    order_id: Optional[int] = None,
    status: Optional[str] = None,
    limit: int = 50,
    cursor: Optional[str] = None,
) -> Page:
    """
    With order_id: every payment of that order, for its owner or an admin.
    Without: all payments, admin only, optionally filtered by status.
    """
    if order_id is not None:
        user = require_user(db, session_token)
        order = _order_or_404(db, order_id)
        require_owner_or_admin(user, order.user_id)
        stmt = select(Payment).where(Payment.order_id == order_id)
        return Page(items=list(db.execute(stmt.order_by(Payment.id.desc())).scalars()))

    require_admin(db, session_token)
    stmt = select(Payment)
    if status is not None:
        stmt = stmt.where(Payment.status == status)
    return paginate(db, stmt, Payment, limit, cursor)


def get_payment(db: Session, session_token: Optional[str], payment_id: int) -> Optional[Payment]:
    user = require_user(db, session_token)
    payment = db.get(Payment, payment_id)
    if payment is None:
        return None
    order = db.get(Order, payment.order_id)
    require_owner_or_admin(user, order.user_id if order else None)
    return payment


def update_payment(
    db: Session, session_token: Optional[str], payment_id: int, changes: Dict[str, Any]
) -> Payment:
    user = require_user(db, session_token)
    payment = db.get(Payment, payment_id)
    if payment is None:
        raise NotFoundError("Payment")
    order = db.get(Order, payment.order_id)
    require_owner_or_admin(user, order.user_id if order else None)

    previous_status = payment.status
    for key in PAYMENT_UPDATE_FIELDS:
        if changes.get(key) is not None:
            setattr(payment, key, changes[key])

    if (
        user.is_admin
        and order is not None
        and payment.status == "confirmed"
        and previous_status != "confirmed"
    ):
        _notify_confirmed(db, order)
        logger.info(f"Payment {payment_id} confirmed by admin {user.id}")
    db.commit()
    return payment


def remove_payment(db: Session, session_token: Optional[str], payment_id: int) -> int:
    require_admin(db, session_token)
    payment = db.get(Payment, payment_id)
    if payment is None:
        raise NotFoundError("Payment")
    db.delete(payment)
    db.flush()
    _relink_latest_payment(db, payment.order_id)
    db.commit()
    return payment_id


def bulk_remove_payments(db: Session, session_token: Optional[str], payment_ids: List[int]) -> int:
    require_admin(db, session_token)
    order_ids = set()
    for payment_id in payment_ids:
        payment = db.get(Payment, payment_id)
        if payment is None:
            raise NotFoundError("Payment", str(payment_id))
        order_ids.add(payment.order_id)
        db.delete(payment)
    db.flush()
    for order_id in order_ids:
        _relink_latest_payment(db, order_id)
    db.commit()
    return len(payment_ids)


def bulk_update_payment_status(
    db: Session, session_token: Optional[str], payment_ids: List[int], status: str
) -> int:
    """Admin bulk status change. Confirmations notify each order's owner."""
    require_admin(db, session_token)
    for payment_id in payment_ids:
        payment = db.get(Payment, payment_id)
        if payment is None:
            raise NotFoundError("Payment", str(payment_id))
        if status == "confirmed" and payment.status != "confirmed":
            order = db.get(Order, payment.order_id)
            if order is not None:
                _notify_confirmed(db, order)
        payment.status = status
    db.commit()
    logger.info(f"Set status={status} on {len(payment_ids)} payments")
    return len(payment_ids)
