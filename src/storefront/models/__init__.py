# Re-export all models from a single entry point so the rest of the app
# can import cleanly:
#   from storefront.models import User, Product, Order
#
# Importing all models here also ensures they are registered with Base.metadata
# before any call to Base.metadata.create_all().

from storefront.models.cart import Cart, Wishlist
from storefront.models.notification import Notification
from storefront.models.order import Order, Payment
from storefront.models.product import Category, Product
from storefront.models.review import Review
from storefront.models.settings import StoreSettings
from storefront.models.user import User, UserSession

__all__ = [
    "User",
    "UserSession",
    "Category",
    "Product",
    "Cart",
    "Wishlist",
    "Order",
    "Payment",
    "Review",
    "Notification",
    "StoreSettings",
]
