from flask import Blueprint

from storefront.db import get_db
from storefront.routes.schemas import CartItemsSchema, CartLineSchema, CartQuantitySchema
from storefront.routes.utils import get_session_token, load_json, success_response
from storefront.schemas.cart_schemas import CartOut
from storefront.schemas.common_schemas import dump
from storefront.services import carts

carts_bp = Blueprint("carts", __name__)

_items_schema = CartItemsSchema()
_line_schema = CartLineSchema()
_quantity_schema = CartQuantitySchema()


@carts_bp.route("", methods=["GET"])
def get_cart():
    """The caller's cart, or null before anything was ever added."""
    return success_response(dump(CartOut, carts.get_cart(get_db(), get_session_token())))


@carts_bp.route("", methods=["PUT"])
def set_cart_items():
    body = load_json(_items_schema)
    cart = carts.set_cart_items(get_db(), get_session_token(), body["items"])
    return success_response(dump(CartOut, cart))


@carts_bp.route("/items", methods=["POST"])
def add_cart_item():
    body = load_json(_line_schema)
    cart = carts.add_cart_item(
        get_db(), get_session_token(), body["product_id"], body["quantity"], body["price_snapshot"]
    )
    return success_response(dump(CartOut, cart), "Item added to cart.", 201)


@carts_bp.route("/items/<int:product_id>", methods=["PATCH"])
def update_cart_item(product_id: int):
    body = load_json(_quantity_schema)
    cart = carts.update_cart_item_quantity(
        get_db(), get_session_token(), product_id, body["quantity"], body["price_snapshot"]
    )
    return success_response(dump(CartOut, cart))


@carts_bp.route("/items/<int:product_id>", methods=["DELETE"])
def remove_cart_item(product_id: int):
    cart = carts.remove_cart_item(get_db(), get_session_token(), product_id)
    return success_response(dump(CartOut, cart), "Item removed from cart.")


@carts_bp.route("", methods=["DELETE"])
def clear_cart():
    cart = carts.clear_cart(get_db(), get_session_token())
    return success_response(dump(CartOut, cart), "Cart cleared.")
