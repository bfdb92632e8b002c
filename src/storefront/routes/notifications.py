from flask import Blueprint, request

from storefront.core.exceptions import NotFoundError
from storefront.db import get_db
from storefront.routes.schemas import NotificationBulkSchema, NotificationCreateSchema
from storefront.routes.utils import (
    get_session_token,
    load_json,
    page_args,
    parse_bool,
    success_response,
)
from storefront.schemas.common_schemas import dump, dump_page
from storefront.schemas.notification_schemas import NotificationOut
from storefront.services import notifications

notifications_bp = Blueprint("notifications", __name__)

_create_schema = NotificationCreateSchema()
_bulk_schema = NotificationBulkSchema()


@notifications_bp.route("", methods=["GET"])
def list_notifications():
    limit, cursor = page_args()
    read = parse_bool(request.args.get("read"), default=None)
    page = notifications.list_notifications(get_db(), get_session_token(), read, limit, cursor)
    return success_response(dump_page(NotificationOut, page))


@notifications_bp.route("/unread-count", methods=["GET"])
def unread_count():
    return success_response({"count": notifications.unread_count(get_db(), get_session_token())})


@notifications_bp.route("/<int:notification_id>", methods=["GET"])
def get_notification(notification_id: int):
    notification = notifications.get_notification(get_db(), get_session_token(), notification_id)
    if notification is None:
        raise NotFoundError("Notification")
    return success_response(dump(NotificationOut, notification))


@notifications_bp.route("/<int:notification_id>/read", methods=["POST"])
def mark_read(notification_id: int):
    notification = notifications.mark_read(get_db(), get_session_token(), notification_id)
    return success_response(dump(NotificationOut, notification))


@notifications_bp.route("/read-all", methods=["POST"])
def mark_all_read():
    count = notifications.mark_all_read(get_db(), get_session_token())
    return success_response({"count": count}, f"{count} notifications marked read.")


@notifications_bp.route("", methods=["POST"])
def create_notification():
    body = load_json(_create_schema)
    notification = notifications.create_notification(get_db(), get_session_token(), body)
    return success_response(dump(NotificationOut, notification), "Notification sent.", 201)


@notifications_bp.route("/bulk", methods=["POST"])
def bulk_create_notifications():
    body = load_json(_bulk_schema)
    ids = notifications.bulk_create_notifications(
        get_db(), get_session_token(), body["notifications"]
    )
    return success_response({"ids": ids}, f"{len(ids)} notifications sent.", 201)


@notifications_bp.route("/<int:notification_id>", methods=["DELETE"])
def remove_notification(notification_id: int):
    notifications.remove_notification(get_db(), get_session_token(), notification_id)
    return success_response({"id": notification_id}, "Notification deleted.")


@notifications_bp.route("", methods=["DELETE"])
def remove_all_notifications():
    count = notifications.remove_all_notifications(get_db(), get_session_token())
    return success_response({"count": count}, f"{count} notifications deleted.")
