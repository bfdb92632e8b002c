from flask import Blueprint

from storefront.db import get_db
from storefront.routes.schemas import IdListSchema, UserUpdateSchema
from storefront.routes.utils import get_session_token, load_json, page_args, success_response
from storefront.schemas.common_schemas import dump, dump_page
from storefront.schemas.user_schemas import UserOut
from storefront.services import users

users_bp = Blueprint("users", __name__)

_update_schema = UserUpdateSchema()
_ids_schema = IdListSchema()


@users_bp.route("", methods=["GET"])
def list_users():
    limit, cursor = page_args()
    page = users.list_users(get_db(), get_session_token(), limit, cursor)
    return success_response(dump_page(UserOut, page))


@users_bp.route("/<int:user_id>", methods=["GET"])
def get_user(user_id: int):
    return success_response(dump(UserOut, users.get_user(get_db(), get_session_token(), user_id)))


@users_bp.route("/<int:user_id>", methods=["PATCH"])
def update_user(user_id: int):
    body = load_json(_update_schema)
    user = users.update_user(get_db(), get_session_token(), user_id, body)
    return success_response(dump(UserOut, user), "User updated.")


@users_bp.route("/<int:user_id>", methods=["DELETE"])
def remove_user(user_id: int):
    users.remove_user(get_db(), get_session_token(), user_id)
    return success_response({"id": user_id}, "User deleted.")


@users_bp.route("/bulk-delete", methods=["POST"])
def bulk_delete_users():
    body = load_json(_ids_schema)
    count = users.bulk_delete_users(get_db(), get_session_token(), body["ids"])
    return success_response({"count": count}, f"{count} users deleted.")
