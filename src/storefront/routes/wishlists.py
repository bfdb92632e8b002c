from flask import Blueprint

from storefront.db import get_db
from storefront.routes.schemas import WishlistItemSchema, WishlistSetSchema
from storefront.routes.utils import get_session_token, load_json, success_response
from storefront.schemas.cart_schemas import WishlistOut
from storefront.schemas.common_schemas import dump
from storefront.services import wishlists

wishlists_bp = Blueprint("wishlists", __name__)

_item_schema = WishlistItemSchema()
_set_schema = WishlistSetSchema()


@wishlists_bp.route("", methods=["GET"])
def get_wishlist():
    return success_response(dump(WishlistOut, wishlists.get_wishlist(get_db(), get_session_token())))


@wishlists_bp.route("", methods=["PUT"])
def set_wishlist():
    body = load_json(_set_schema)
    wishlist = wishlists.set_wishlist(get_db(), get_session_token(), body["product_ids"])
    return success_response(dump(WishlistOut, wishlist))


@wishlists_bp.route("/items", methods=["POST"])
def add_to_wishlist():
    body = load_json(_item_schema)
    wishlist = wishlists.add_to_wishlist(get_db(), get_session_token(), body["product_id"])
    return success_response(dump(WishlistOut, wishlist), "Added to wishlist.")


@wishlists_bp.route("/items/<int:product_id>", methods=["DELETE"])
def remove_from_wishlist(product_id: int):
    wishlist = wishlists.remove_from_wishlist(get_db(), get_session_token(), product_id)
    return success_response(dump(WishlistOut, wishlist), "Removed from wishlist.")
