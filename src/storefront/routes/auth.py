import logging

from flask import Blueprint

from storefront.db import get_db
from storefront.routes.schemas import ChangePasswordSchema, LoginSchema, RegisterSchema
from storefront.routes.utils import client_info, get_session_token, load_json, success_response
from storefront.schemas.common_schemas import dump
from storefront.schemas.user_schemas import UserOut
from storefront.services import users

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)

_register_schema = RegisterSchema()
_login_schema = LoginSchema()
_change_password_schema = ChangePasswordSchema()


def _session_payload(result):
    return {"session_token": result["session_token"], "user": dump(UserOut, result["user"])}


@auth_bp.route("/register", methods=["POST"])
def register():
    body = load_json(_register_schema)
    user_agent, ip = client_info()
    result = users.register(get_db(), user_agent=user_agent, ip=ip, **body)
    return success_response(_session_payload(result), "Account created.", 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    body = load_json(_login_schema)
    user_agent, ip = client_info()
    result = users.login(get_db(), body["email"], body["password"], user_agent=user_agent, ip=ip)
    return success_response(_session_payload(result))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    token = get_session_token()
    if token:
        users.logout(get_db(), token)
    return success_response(None, "Logged out.")


@auth_bp.route("/me", methods=["GET"])
def me():
    """The current user, or null for an anonymous or expired session."""
    return success_response(dump(UserOut, users.get_me(get_db(), get_session_token())))


@auth_bp.route("/password", methods=["POST"])
def change_password():
    body = load_json(_change_password_schema)
    users.change_password(
        get_db(), get_session_token(), body["current_password"], body["new_password"]
    )
    return success_response(None, "Password changed.")
