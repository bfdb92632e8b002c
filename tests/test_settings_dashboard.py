import pytest

from storefront.core.config import config
from storefront.core.exceptions import ForbiddenError
from storefront.services import dashboard, orders, settings
from storefront.utils.date_utils import DateUtils


def test_settings_start_empty_and_fall_back_to_defaults(db, admin):
    _, admin_token = admin
    assert settings.get_public_settings(db) is None
    assert settings.get_settings(db, admin_token) is None

    effective = settings.effective_settings(db)
    assert effective.store_name == "Ell's Import"
    assert effective.free_shipping_threshold_pesewas == 50000
    assert effective.shipping_flat_rate_pesewas == 2000
    assert effective.currency == "GHS"


def test_update_settings_upserts_singleton(db, admin):
    _, admin_token = admin
    first = settings.update_settings(db, admin_token, {"store_name": "Ell's Imports Accra"})
    second = settings.update_settings(
        db, admin_token, {"shipping_flat_rate_pesewas": 1500, "unknown_key": "ignored"}
    )
    assert first.id == second.id
    assert second.store_name == "Ell's Imports Accra"

    effective = settings.effective_settings(db)
    assert effective.shipping_flat_rate_pesewas == 1500
    # Keys never saved keep their defaults.
    assert effective.payment_phone == "0553301044"


def test_settings_writes_need_admin(db, customer):
    _, token = customer
    with pytest.raises(ForbiddenError):
        settings.update_settings(db, token, {"store_name": "Mine"})
    with pytest.raises(ForbiddenError):
        settings.get_settings(db, token)


def test_dashboard_stats(db, make_user, make_product):
    _, alice_token = make_user()
    make_user()
    _, admin_token = make_user(role="admin")
    make_product(slug="a")
    make_product(slug="b", status="draft")
    order_data = {
        "items": [{"product_id": 1, "quantity": 1, "price_snapshot": 3000, "name": "Scarf"}],
        "subtotal": 3000,
        "total": 5000,
        "order_type": "pickup",
    }
    first = orders.create_order(db, alice_token, dict(order_data))
    orders.create_order(db, alice_token, dict(order_data))
    orders.update_order(db, admin_token, first.id, {"status": "shipped"})

    with pytest.raises(ForbiddenError):
        dashboard.get_dashboard_stats(db, alice_token)

    stats = dashboard.get_dashboard_stats(db, admin_token)
    assert stats["total_orders"] == 2
    assert stats["pending_orders"] == 1
    assert stats["revenue"] == 10000
    assert stats["customer_count"] == 2
    assert stats["product_count"] == 2

    by_day = stats["orders_by_day"]
    assert len(by_day) == 30
    today = DateUtils.local_date(DateUtils.now_utc(), "Africa/Accra")
    assert by_day[-1] == {"date": today, "orders": 2, "revenue": 10000}
    assert sum(day["orders"] for day in by_day) == 2

    by_status = {row["name"]: row["count"] for row in stats["orders_by_status"]}
    assert by_status["pending"] == 1
    assert by_status["shipped"] == 1
    assert by_status["cancelled"] == 0


def test_dashboard_days_follow_the_deploy_timezone(db, customer, admin, monkeypatch):
    _, token = customer
    _, admin_token = admin
    monkeypatch.setattr(config.store, "timezone", "Pacific/Kiritimati")
    orders.create_order(
        db,
        token,
        {
            "items": [{"product_id": 1, "quantity": 1, "price_snapshot": 3000, "name": "Scarf"}],
            "subtotal": 3000,
            "total": 3000,
            "order_type": "pickup",
        },
    )
    settings.update_settings(db, admin_token, {"store_name": "Ell's Imports Accra"})

    by_day = dashboard.get_dashboard_stats(db, admin_token)["orders_by_day"]
    today = DateUtils.local_date(DateUtils.now_utc(), "Pacific/Kiritimati")
    assert by_day[-1] == {"date": today, "orders": 1, "revenue": 3000}
