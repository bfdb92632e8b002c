import logging

from flask import Blueprint, request

from storefront.core.exceptions import NotFoundError
from storefront.db import get_db
from storefront.routes.schemas import (
    CheckoutSchema,
    OrderBulkStatusSchema,
    OrderCreateSchema,
    OrderUpdateSchema,
)
from storefront.routes.utils import get_session_token, load_json, page_args, success_response
from storefront.schemas.common_schemas import dump, dump_page
from storefront.schemas.order_schemas import CheckoutOut, CheckoutQuoteOut, OrderOut
from storefront.services import orders

logger = logging.getLogger(__name__)

orders_bp = Blueprint("orders", __name__)

_create_schema = OrderCreateSchema()
_checkout_schema = CheckoutSchema()
_update_schema = OrderUpdateSchema()
_bulk_status_schema = OrderBulkStatusSchema()


@orders_bp.route("/checkout", methods=["POST"])
def checkout():
    """
    Server-side checkout from the caller's cart:
      1. Reject an empty cart or lines whose product is gone
      2. Price the cart with the current store settings
      3. Create the order and a pending payment for its total
      4. Empty the cart
    One commit covers every step; any failure leaves nothing behind.
    """
    body = load_json(_checkout_schema)
    result = orders.checkout(
        get_db(), get_session_token(), body["order_type"], body.get("shipping_address")
    )
    return success_response(dump(CheckoutOut, result), "Order placed successfully.", 201)


@orders_bp.route("/quote", methods=["GET"])
def quote():
    return success_response(dump(CheckoutQuoteOut, orders.quote_checkout(get_db(), get_session_token())))


@orders_bp.route("", methods=["POST"])
def create_order():
    body = load_json(_create_schema)
    order = orders.create_order(get_db(), get_session_token(), body)
    return success_response(dump(OrderOut, order), "Order created.", 201)


@orders_bp.route("", methods=["GET"])
def list_orders():
    """Admins get every order, customers their own; newest first."""
    limit, cursor = page_args()
    page = orders.list_orders(
        get_db(), get_session_token(), request.args.get("status"), limit, cursor
    )
    return success_response(dump_page(OrderOut, page))


@orders_bp.route("/<int:order_id>", methods=["GET"])
def get_order(order_id: int):
    order = orders.get_order(get_db(), get_session_token(), order_id)
    if order is None:
        raise NotFoundError("Order")
    return success_response(dump(OrderOut, order))


@orders_bp.route("/<int:order_id>/whatsapp-link", methods=["GET"])
def whatsapp_payment_link(order_id: int):
    link = orders.whatsapp_payment_link(get_db(), get_session_token(), order_id)
    return success_response({"url": link})


@orders_bp.route("/<int:order_id>", methods=["PATCH"])
def update_order(order_id: int):
    body = load_json(_update_schema)
    order = orders.update_order(get_db(), get_session_token(), order_id, body)
    return success_response(dump(OrderOut, order), "Order updated.")


@orders_bp.route("/<int:order_id>", methods=["DELETE"])
def remove_order(order_id: int):
    orders.remove_order(get_db(), get_session_token(), order_id)
    return success_response({"id": order_id}, "Order deleted.")


@orders_bp.route("/bulk-status", methods=["POST"])
def bulk_update_order_status():
    body = load_json(_bulk_status_schema)
    count = orders.bulk_update_order_status(
        get_db(), get_session_token(), body["ids"], body["status"]
    )
    return success_response({"count": count}, f"{count} orders updated.")
