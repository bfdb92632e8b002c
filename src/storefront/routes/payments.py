from flask import Blueprint, request

from storefront.core.exceptions import NotFoundError
from storefront.db import get_db
from storefront.routes.schemas import (
    IdListSchema,
    PaymentBulkStatusSchema,
    PaymentCreateSchema,
    PaymentUpdateSchema,
)
from storefront.routes.utils import (
    get_session_token,
    load_json,
    page_args,
    parse_int,
    success_response,
)
from storefront.schemas.common_schemas import dump, dump_page
from storefront.schemas.order_schemas import PaymentOut
from storefront.services import payments

payments_bp = Blueprint("payments", __name__)

_create_schema = PaymentCreateSchema()
_update_schema = PaymentUpdateSchema()
_bulk_status_schema = PaymentBulkStatusSchema()
_ids_schema = IdListSchema()


@payments_bp.route("", methods=["POST"])
def create_payment():
    body = load_json(_create_schema)
    payment = payments.create_payment(get_db(), get_session_token(), body)
    return success_response(dump(PaymentOut, payment), "Payment recorded.", 201)


@payments_bp.route("", methods=["GET"])
def list_payments():
    """?order_id= lists one order's payments; without it, admin-only listing."""
    order_id = request.args.get("order_id")
    if order_id is not None:
        order_id = parse_int(order_id, min_val=1, field_name="order_id")
    limit, cursor = page_args()
    page = payments.list_payments(
        get_db(), get_session_token(), order_id, request.args.get("status"), limit, cursor
    )
    return success_response(dump_page(PaymentOut, page))


@payments_bp.route("/<int:payment_id>", methods=["GET"])
def get_payment(payment_id: int):
    payment = payments.get_payment(get_db(), get_session_token(), payment_id)
    if payment is None:
        raise NotFoundError("Payment")
    return success_response(dump(PaymentOut, payment))


@payments_bp.route("/<int:payment_id>", methods=["PATCH"])
def update_payment(payment_id: int):
    body = load_json(_update_schema)
    payment = payments.update_payment(get_db(), get_session_token(), payment_id, body)
    return success_response(dump(PaymentOut, payment), "Payment updated.")


@payments_bp.route("/<int:payment_id>", methods=["DELETE"])
def remove_payment(payment_id: int):
    payments.remove_payment(get_db(), get_session_token(), payment_id)
    return success_response({"id": payment_id}, "Payment deleted.")


@payments_bp.route("/bulk-delete", methods=["POST"])
def bulk_remove_payments():
    body = load_json(_ids_schema)
    count = payments.bulk_remove_payments(get_db(), get_session_token(), body["ids"])
    return success_response({"count": count}, f"{count} payments deleted.")


@payments_bp.route("/bulk-status", methods=["POST"])
def bulk_update_payment_status():
    body = load_json(_bulk_status_schema)
    count = payments.bulk_update_payment_status(
        get_db(), get_session_token(), body["ids"], body["status"]
    )
    return success_response({"count": count}, f"{count} payments updated.")
