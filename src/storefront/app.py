import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import click
from flask import Flask, g, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront import db as database
from storefront.core.config import config
from storefront.core.exceptions import BaseAPIException, DatabaseError, InternalServerError
from storefront.routes import (
    auth_bp,
    carts_bp,
    categories_bp,
    dashboard_bp,
    notifications_bp,
    orders_bp,
    payments_bp,
    products_bp,
    reviews_bp,
    settings_bp,
    users_bp,
    wishlists_bp,
)

logger = logging.getLogger(__name__)


def _error(code: str, message: str, status: int, details: Optional[Dict[str, Any]] = None):
    return jsonify({
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), status


def create_app(database_url: Optional[str] = None) -> Flask:
    """
    Application factory.

    database_url overrides DATABASE_URL; tests pass an in-memory SQLite URL.
    """
    logging.basicConfig(
        level=getattr(logging, config.app.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    config.validate()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.security.secret_key
    app.config["DEBUG"] = config.app.debug

    database.init_engine(database_url)

    # ------------------------------------------------------------------ #
    # Blueprints: each domain registered under /api/v1/                   #
    # ------------------------------------------------------------------ #
    prefix = f"/api/{config.api.version}"
    app.register_blueprint(auth_bp,          url_prefix=f"{prefix}/auth")
    app.register_blueprint(users_bp,         url_prefix=f"{prefix}/users")
    app.register_blueprint(categories_bp,    url_prefix=f"{prefix}/categories")
    app.register_blueprint(products_bp,      url_prefix=f"{prefix}/products")
    app.register_blueprint(carts_bp,         url_prefix=f"{prefix}/cart")
    app.register_blueprint(wishlists_bp,     url_prefix=f"{prefix}/wishlist")
    app.register_blueprint(orders_bp,        url_prefix=f"{prefix}/orders")
    app.register_blueprint(payments_bp,      url_prefix=f"{prefix}/payments")
    app.register_blueprint(reviews_bp,       url_prefix=f"{prefix}/reviews")
    app.register_blueprint(notifications_bp, url_prefix=f"{prefix}/notifications")
    app.register_blueprint(settings_bp,      url_prefix=f"{prefix}/settings")
    app.register_blueprint(dashboard_bp,     url_prefix=f"{prefix}/admin/dashboard")

    @app.before_request
    def assign_request_id():
        g.request_id = uuid.uuid4().hex[:8]

    app.teardown_appcontext(database.close_db)

    # ------------------------------------------------------------------ #
    # Error handlers: consistent JSON error envelope                      #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def handle_api_exception(error: BaseAPIException):
        request_id = g.get("request_id")
        if error.status_code >= 500:
            logger.error(f"[{request_id}] {error.internal_message}\n{error.traceback or ''}")
        elif error.status_code in (401, 403):
            logger.warning(f"[{request_id}] {error.error_code}: {error.message}")
        else:
            logger.info(f"[{request_id}] {error.error_code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(400)
    def handle_bad_request(error):
        logger.warning(f"[{g.get('request_id')}] Bad request: {error.description}")
        return _error("BAD_REQUEST", str(error.description), 400)

    @app.errorhandler(401)
    def handle_unauthorized(error):
        return _error("UNAUTHORIZED", str(error.description), 401)

    @app.errorhandler(404)
    def handle_not_found(error):
        logger.info(f"[{g.get('request_id')}] Not found: {error.description}")
        return _error("NOT_FOUND", str(error.description), 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return _error("METHOD_NOT_ALLOWED", str(error.description), 405)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        return handle_api_exception(DatabaseError(str(error)))

    @app.errorhandler(500)
    def handle_internal_error(error):
        return handle_api_exception(InternalServerError(str(error)))

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        try:
            with database.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return jsonify({
                "status": "ok",
                "database": "reachable",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }), 200
        except SQLAlchemyError as exc:
            logger.error(f"Health check failed: {exc}")
            return jsonify({"status": "error", "database": "unreachable"}), 503

    # ------------------------------------------------------------------ #
    # CLI                                                                  #
    # ------------------------------------------------------------------ #
    @app.cli.command("init-db")
    def init_db_command():
        """Create every table."""
        database.create_all()
        click.echo("Database tables created.")

    @app.cli.command("seed")
    def seed_command():
        """Load an admin, categories, products and store settings."""
        from storefront.seed import seed

        seed()
        click.echo("Seed data loaded.")

    @app.cli.command("prune-sessions")
    def prune_sessions_command():
        """Delete expired login sessions."""
        from storefront.services.auth import prune_expired_sessions

        with database.session_scope() as session:
            removed = prune_expired_sessions(session)
        click.echo(f"Removed {removed} expired sessions.")

    return app


def main() -> None:
    application = create_app()
    application.run(debug=config.app.debug, host=config.app.host, port=config.app.port)


if __name__ == "__main__":
    main()
