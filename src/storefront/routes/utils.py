from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from flask import abort, jsonify, request
from marshmallow import Schema
from marshmallow import ValidationError as SchemaValidationError

from storefront.core.config import config
from storefront.core.exceptions import ValidationError


def success_response(data, message: Optional[str] = None, status: int = 200):
    """Consistent success response envelope."""
    response = {
        "success": True,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message:
        response["message"] = message
    return jsonify(response), status


def parse_int(
    v,
    default=None,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
    field_name: str = "value",
) -> Optional[int]:
    """Parse an integer with optional range validation."""
    try:
        result = int(v)
        if min_val is not None and result < min_val:
            abort(400, f"{field_name} must be at least {min_val}")
        if max_val is not None and result > max_val:
            abort(400, f"{field_name} cannot exceed {max_val}")
        return result
    except (TypeError, ValueError):
        if default is not None:
            return default
        abort(400, f"Invalid {field_name}: must be a valid integer")


def parse_bool(v, default: Optional[bool] = False) -> Optional[bool]:
    """Parse a boolean value from a query string."""
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    return str(v).lower() in ("1", "true", "t", "yes", "y", "on")


def page_args(default_limit: Optional[int] = None) -> Tuple[int, Optional[str]]:
    """limit and cursor from the query string, limit clamped to the API maximum."""
    limit = request.args.get("limit")
    default = default_limit or config.api.default_page_size
    if limit is None:
        return default, request.args.get("cursor") or None
    return (
        parse_int(limit, min_val=1, max_val=config.api.max_page_size, field_name="limit"),
        request.args.get("cursor") or None,
    )


def get_session_token() -> Optional[str]:
    """Session token from X-Session-Token, falling back to a Bearer header."""
    token = request.headers.get("X-Session-Token")
    if token:
        return token.strip()
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return None


def load_json(schema: Schema, partial: bool = False) -> Dict[str, Any]:
    """Validate the JSON body against a marshmallow schema."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.load(payload, partial=partial)
    except SchemaValidationError as err:
        messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        raise ValidationError("Validation failed", field_errors=messages)


def client_info() -> Tuple[Optional[str], Optional[str]]:
    return request.headers.get("User-Agent"), request.remote_addr
