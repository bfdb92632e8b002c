from flask import Blueprint

from storefront.core.exceptions import NotFoundError
from storefront.db import get_db
from storefront.routes.schemas import CategoryBulkSchema, CategorySchema
from storefront.routes.utils import get_session_token, load_json, page_args, success_response
from storefront.schemas.common_schemas import dump, dump_page
from storefront.schemas.product_schemas import CategoryOut
from storefront.services import categories

categories_bp = Blueprint("categories", __name__)

_category_schema = CategorySchema()
_bulk_schema = CategoryBulkSchema()


@categories_bp.route("", methods=["GET"])
def list_categories():
    limit, cursor = page_args(default_limit=100)
    page = categories.list_categories(get_db(), limit, cursor)
    return success_response(dump_page(CategoryOut, page))


@categories_bp.route("/<int:category_id>", methods=["GET"])
def get_category(category_id: int):
    category = categories.get_category(get_db(), category_id)
    if category is None:
        raise NotFoundError("Category", str(category_id))
    return success_response(dump(CategoryOut, category))


@categories_bp.route("/slug/<slug>", methods=["GET"])
def get_category_by_slug(slug: str):
    category = categories.get_category_by_slug(get_db(), slug)
    if category is None:
        raise NotFoundError("Category")
    return success_response(dump(CategoryOut, category))


@categories_bp.route("", methods=["POST"])
def create_category():
    body = load_json(_category_schema)
    category = categories.create_category(get_db(), get_session_token(), body)
    return success_response(dump(CategoryOut, category), "Category created.", 201)


@categories_bp.route("/bulk", methods=["POST"])
def bulk_create_categories():
    body = load_json(_bulk_schema)
    ids = categories.bulk_create_categories(get_db(), get_session_token(), body["categories"])
    return success_response({"ids": ids}, f"{len(ids)} categories created.", 201)


@categories_bp.route("/<int:category_id>", methods=["PATCH"])
def update_category(category_id: int):
    body = load_json(_category_schema, partial=True)
    category = categories.update_category(get_db(), get_session_token(), category_id, body)
    return success_response(dump(CategoryOut, category), "Category updated.")


@categories_bp.route("/<int:category_id>", methods=["DELETE"])
def remove_category(category_id: int):
    categories.remove_category(get_db(), get_session_token(), category_id)
    return success_response({"id": category_id}, "Category deleted.")
