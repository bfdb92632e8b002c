from flask import Blueprint, request

from storefront.core.exceptions import NotFoundError
from storefront.db import get_db
from storefront.routes.schemas import (
    ReviewBulkStatusSchema,
    ReviewCreateSchema,
    ReviewUpdateSchema,
)
from storefront.routes.utils import get_session_token, load_json, page_args, success_response
from storefront.schemas.common_schemas import dump, dump_page
from storefront.schemas.review_schemas import ReviewOut
from storefront.services import reviews

reviews_bp = Blueprint("reviews", __name__)

_create_schema = ReviewCreateSchema()
_update_schema = ReviewUpdateSchema()
_bulk_status_schema = ReviewBulkStatusSchema()


@reviews_bp.route("", methods=["POST"])
def create_review():
    body = load_json(_create_schema)
    review = reviews.create_review(get_db(), get_session_token(), body)
    return success_response(dump(ReviewOut, review), "Review submitted for moderation.", 201)


@reviews_bp.route("/product/<int:product_id>", methods=["GET"])
def list_reviews_by_product(product_id: int):
    limit, cursor = page_args()
    page = reviews.list_reviews_by_product(
        get_db(),
        product_id,
        get_session_token(),
        request.args.get("status", "approved"),
        limit,
        cursor,
    )
    return success_response(dump_page(ReviewOut, page))


@reviews_bp.route("/mine", methods=["GET"])
def list_my_reviews():
    limit, cursor = page_args()
    page = reviews.list_reviews_by_user(get_db(), get_session_token(), limit, cursor)
    return success_response(dump_page(ReviewOut, page))


@reviews_bp.route("/<int:review_id>", methods=["GET"])
def get_review(review_id: int):
    review = reviews.get_review(get_db(), review_id)
    if review is None:
        raise NotFoundError("Review")
    return success_response(dump(ReviewOut, review))


@reviews_bp.route("/<int:review_id>", methods=["PATCH"])
def update_review(review_id: int):
    body = load_json(_update_schema)
    review = reviews.update_review(get_db(), get_session_token(), review_id, body)
    return success_response(dump(ReviewOut, review), "Review updated.")


@reviews_bp.route("/<int:review_id>", methods=["DELETE"])
def remove_review(review_id: int):
    reviews.remove_review(get_db(), get_session_token(), review_id)
    return success_response({"id": review_id}, "Review deleted.")


@reviews_bp.route("/bulk-status", methods=["POST"])
def bulk_update_review_status():
    body = load_json(_bulk_status_schema)
    count = reviews.bulk_update_review_status(
        get_db(), get_session_token(), body["ids"], body["status"]
    )
    return success_response({"count": count}, f"{count} reviews updated.")
