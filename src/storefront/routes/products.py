from flask import Blueprint, request

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.db import get_db
from storefront.routes.schemas import (
    IdListSchema,
    ProductBulkSchema,
    ProductBulkStatusSchema,
    ProductBulkUpdateSchema,
    ProductSchema,
    ProductUpdateSchema,
)
from storefront.routes.utils import (
    get_session_token,
    load_json,
    page_args,
    parse_int,
    success_response,
)
from storefront.schemas.common_schemas import dump, dump_many, dump_page
from storefront.schemas.product_schemas import ProductOut
from storefront.services import products

products_bp = Blueprint("products", __name__)

_product_schema = ProductSchema()
_update_schema = ProductUpdateSchema()
_bulk_schema = ProductBulkSchema()
_bulk_update_schema = ProductBulkUpdateSchema()
_bulk_status_schema = ProductBulkStatusSchema()
_ids_schema = IdListSchema()


@products_bp.route("", methods=["GET"])
def list_products():
    """Role-gated listing; non-admins only see store-visible products."""
    limit, cursor = page_args()
    page = products.list_products(
        get_db(), get_session_token(), request.args.get("status"), limit, cursor
    )
    return success_response(dump_page(ProductOut, page))


@products_bp.route("/store", methods=["GET"])
def list_for_store():
    limit = parse_int(request.args.get("limit", 48), min_val=1, max_val=200, field_name="limit")
    items = products.list_for_store(get_db(), request.args.get("category_id"), limit)
    return success_response(dump_many(ProductOut, items))


@products_bp.route("/by-ids", methods=["GET"])
def get_products_by_ids():
    raw = request.args.get("ids", "")
    try:
        ids = [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise ValidationError("ids must be a comma-separated list of integers")
    return success_response(dump_many(ProductOut, products.get_products_by_ids(get_db(), ids)))


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    product = products.get_product(get_db(), product_id)
    if product is None:
        raise NotFoundError("Product", str(product_id))
    return success_response(dump(ProductOut, product))


@products_bp.route("/slug/<slug>", methods=["GET"])
def get_product_by_slug(slug: str):
    product = products.get_product_by_slug(get_db(), slug)
    if product is None:
        raise NotFoundError("Product")
    return success_response(dump(ProductOut, product))


@products_bp.route("", methods=["POST"])
def create_product():
    body = load_json(_product_schema)
    product = products.create_product(get_db(), get_session_token(), body)
    return success_response(dump(ProductOut, product), "Product created.", 201)


@products_bp.route("/bulk", methods=["POST"])
def bulk_create_products():
    body = load_json(_bulk_schema)
    ids = products.bulk_create_products(get_db(), get_session_token(), body["products"])
    return success_response({"ids": ids}, f"{len(ids)} products created.", 201)


@products_bp.route("/<int:product_id>", methods=["PATCH"])
def update_product(product_id: int):
    body = load_json(_update_schema)
    product = products.update_product(get_db(), get_session_token(), product_id, body)
    return success_response(dump(ProductOut, product), "Product updated.")


@products_bp.route("/bulk-update", methods=["POST"])
def bulk_update_products():
    body = load_json(_bulk_update_schema)
    count = products.bulk_update_products(get_db(), get_session_token(), body["updates"])
    return success_response({"count": count}, f"{count} products updated.")


@products_bp.route("/bulk-status", methods=["POST"])
def bulk_update_product_status():
    body = load_json(_bulk_status_schema)
    count = products.bulk_update_product_status(
        get_db(), get_session_token(), body["ids"], body["status"]
    )
    return success_response({"count": count}, f"{count} products updated.")


@products_bp.route("/<int:product_id>", methods=["DELETE"])
def remove_product(product_id: int):
    products.remove_product(get_db(), get_session_token(), product_id)
    return success_response({"id": product_id}, "Product deleted.")


@products_bp.route("/bulk-delete", methods=["POST"])
def bulk_delete_products():
    body = load_json(_ids_schema)
    count = products.bulk_delete_products(get_db(), get_session_token(), body["ids"])
    return success_response({"count": count}, f"{count} products deleted.")
