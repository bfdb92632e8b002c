from storefront.routes.auth import auth_bp
from storefront.routes.carts import carts_bp
from storefront.routes.categories import categories_bp
from storefront.routes.notifications import notifications_bp
from storefront.routes.orders import orders_bp
from storefront.routes.payments import payments_bp
from storefront.routes.products import products_bp
from storefront.routes.reviews import reviews_bp
from storefront.routes.settings import dashboard_bp, settings_bp
from storefront.routes.users import users_bp
from storefront.routes.wishlists import wishlists_bp

__all__ = [
    "auth_bp",
    "users_bp",
    "categories_bp",
    "products_bp",
    "carts_bp",
    "wishlists_bp",
    "orders_bp",
    "payments_bp",
    "reviews_bp",
    "notifications_bp",
    "settings_bp",
    "dashboard_bp",
]
