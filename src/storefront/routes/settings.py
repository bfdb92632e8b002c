from flask import Blueprint

from storefront.db import get_db
from storefront.routes.schemas import SettingsUpdateSchema
from storefront.routes.utils import get_session_token, load_json, success_response
from storefront.schemas.common_schemas import dump
from storefront.schemas.settings_schemas import DashboardStatsOut, PublicSettingsOut, SettingsOut
from storefront.services import dashboard, settings

settings_bp = Blueprint("settings", __name__)
dashboard_bp = Blueprint("dashboard", __name__)

_update_schema = SettingsUpdateSchema()


@settings_bp.route("/public", methods=["GET"])
def get_public_settings():
    """No auth. null until an admin has saved settings once."""
    return success_response(dump(PublicSettingsOut, settings.get_public_settings(get_db())))


@settings_bp.route("", methods=["GET"])
def get_settings():
    return success_response(dump(SettingsOut, settings.get_settings(get_db(), get_session_token())))


@settings_bp.route("", methods=["PUT", "PATCH"])
def update_settings():
    body = load_json(_update_schema)
    doc = settings.update_settings(get_db(), get_session_token(), body)
    return success_response(dump(SettingsOut, doc), "Settings saved.")


@dashboard_bp.route("/stats", methods=["GET"])
def get_dashboard_stats():
    stats = dashboard.get_dashboard_stats(get_db(), get_session_token())
    return success_response(DashboardStatsOut(**stats).model_dump(mode="json"))
