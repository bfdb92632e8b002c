"""
Seed script -- populates the database with development data.

Run with:
    flask --app storefront.app seed

The script is idempotent: the admin is matched by e-mail, categories and
products by slug, and the settings document is only created when missing.
Set ADMIN_EMAIL / ADMIN_PASSWORD to choose the admin login.
"""

import logging
import os

from sqlalchemy import select

from storefront.core.config import config
from storefront.core.security import hash_password
from storefront.db import session_scope
from storefront.models import Category, Product, StoreSettings, User
from storefront.services.identifiers import PRODUCT_SKU_DIGITS, generate_unique_code

logger = logging.getLogger(__name__)

CATEGORIES = [
    {"name": "Phones & Tablets", "slug": "phones-tablets", "sort_order": 1},
    {"name": "Fashion", "slug": "fashion", "sort_order": 2},
    {"name": "Home & Kitchen", "slug": "home-kitchen", "sort_order": 3},
]

PRODUCTS = [
    {
        "name": "Galaxy A15 128GB",
        "slug": "galaxy-a15-128gb",
        "description": "6.5-inch display, dual SIM, 128 GB storage.",
        "price": 185000,
        "compare_at_price": 199000,
        "stock": 12,
        "category": "phones-tablets",
    },
    {
        "name": "Kente Print Shirt",
        "slug": "kente-print-shirt",
        "description": "Short-sleeve cotton shirt in a kente-inspired print.",
        "price": 25000,
        "stock": 40,
        "category": "fashion",
    },
    {
        "name": "Non-stick Frying Pan 28cm",
        "slug": "non-stick-frying-pan-28cm",
        "description": "Aluminium body with a three-layer non-stick coating.",
        "price": 18000,
        "stock": 0,
        "status": "out_of_stock",
        "category": "home-kitchen",
    },
]


def seed() -> None:
    with session_scope() as session:
        # ------------------------------------------------------------------ #
        # Admin                                                                #
        # ------------------------------------------------------------------ #
        email = os.getenv("ADMIN_EMAIL", "admin@example.com").lower()
        if session.execute(select(User).where(User.email == email)).scalar_one_or_none() is None:
            session.add(
                User(
                    email=email,
                    name="Store Admin",
                    role="admin",
                    password_hash=hash_password(os.getenv("ADMIN_PASSWORD", "change-me-now")),
                )
            )
            logger.info(f"  [+] Admin {email} created")

        # ------------------------------------------------------------------ #
        # Categories                                                           #
        # ------------------------------------------------------------------ #
        category_ids = {}
        for data in CATEGORIES:
            category = session.execute(
                select(Category).where(Category.slug == data["slug"])
            ).scalar_one_or_none()
            if category is None:
                category = Category(**data)
                session.add(category)
                session.flush()
            category_ids[data["slug"]] = category.id
        logger.info("  [+] Categories seeded")

        # ------------------------------------------------------------------ #
        # Products                                                             #
        # ------------------------------------------------------------------ #
        for data in PRODUCTS:
            data = dict(data)
            category_slug = data.pop("category")
            exists = session.execute(
                select(Product.id).where(Product.slug == data["slug"])
            ).first()
            if exists:
                continue
            session.add(
                Product(
                    status=data.pop("status", "active"),
                    sku=generate_unique_code(session, Product.sku, PRODUCT_SKU_DIGITS),
                    images=[],
                    category_ids=[category_ids[category_slug]],
                    **data,
                )
            )
            session.flush()
        logger.info("  [+] Products seeded")

        # ------------------------------------------------------------------ #
        # Store settings                                                       #
        # ------------------------------------------------------------------ #
        if session.execute(select(StoreSettings.id)).first() is None:
            store = config.store
            session.add(
                StoreSettings(
                    store_name=store.store_name,
                    payment_phone=store.payment_phone,
                    payment_name=store.payment_name,
                    admin_whatsapp=store.admin_whatsapp,
                    default_country=store.default_country,
                    currency=store.currency,
                    free_shipping_threshold_pesewas=store.free_shipping_threshold_pesewas,
                    shipping_flat_rate_pesewas=store.shipping_flat_rate_pesewas,
                    tax_rate_percent=store.tax_rate_percent,
                    maintenance_mode=store.maintenance_mode,
                )
            )
            logger.info("  [+] Store settings seeded")
