from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.core.config import config
from storefront.models import Order, Product, User
from storefront.models.order import ORDER_STATUSES
from storefront.services.auth import require_admin
from storefront.utils.date_utils import DateUtils

ORDERS_BY_DAY_WINDOW = 30


def get_dashboard_stats(db: Session, session_token: Optional[str]) -> Dict[str, Any]:
    """
    Headline numbers for the admin dashboard.

    revenue sums every order's total regardless of status. orders_by_day
    buckets orders by calendar day in the store timezone over the last 30
    days, oldest first, with empty days included. The timezone is the
    deploy-time STORE_TIMEZONE setting; the settings document does not carry
    one, so admins cannot change it at runtime.
    """
    require_admin(db, session_token)

    total_orders, revenue = db.execute(
        select(func.count(Order.id), func.coalesce(func.sum(Order.total), 0))
    ).one()
    pending_orders = db.execute(
        select(func.count(Order.id)).where(Order.status == "pending")
    ).scalar_one()
    customer_count = db.execute(
        select(func.count(User.id)).where(User.role == "customer")
    ).scalar_one()
    product_count = db.execute(select(func.count(Product.id))).scalar_one()

    tz_name = config.store.timezone
    days = DateUtils.last_n_local_days(ORDERS_BY_DAY_WINDOW, tz_name)
    buckets = {day: {"date": day, "orders": 0, "revenue": 0} for day in days}
    # One extra day of slack covers timezones ahead of UTC.
    since = DateUtils.now_utc() - timedelta(days=ORDERS_BY_DAY_WINDOW + 1)
    recent = db.execute(
        select(Order.created_at, Order.total).where(Order.created_at >= since)
    ).all()
    for created_at, total in recent:
        bucket = buckets.get(DateUtils.local_date(created_at, tz_name))
        if bucket is not None:
            bucket["orders"] += 1
            bucket["revenue"] += total

    status_counts = dict(
        db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status)).all()
    )
    orders_by_status = [
        {"name": status, "count": status_counts.get(status, 0)} for status in ORDER_STATUSES
    ]

    return {
        "total_orders": total_orders,
        "pending_orders": pending_orders,
        "revenue": int(revenue),
        "customer_count": customer_count,
        "product_count": product_count,
        "orders_by_day": [buckets[day] for day in days],
        "orders_by_status": orders_by_status,
    }
